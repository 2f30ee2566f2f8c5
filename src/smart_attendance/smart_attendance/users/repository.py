from __future__ import annotations

from datetime import datetime
from typing import Optional, Protocol, Sequence

from ..core.enums import Role
from .model import Account


class AccountRepository(Protocol):
    """Giao diện repository cho Account.

    Lưu ý (DIP): tầng service phụ thuộc vào interface này, không phụ thuộc trực tiếp DB cụ thể.
    Implementations must reject a second account with the same (lower-cased) email
    with DuplicateEmail, even under concurrent writers.
    """

    def get_by_id(self, account_id: int) -> Optional[Account]:
        raise NotImplementedError

    def get_by_email(self, email: str) -> Optional[Account]:
        raise NotImplementedError

    def create_account(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> Account:
        raise NotImplementedError

    def update_last_login(self, account_id: int, *, at: datetime) -> Optional[Account]:
        raise NotImplementedError

    def update_password_hash(self, account_id: int, *, password_hash: str) -> bool:
        raise NotImplementedError

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        raise NotImplementedError

    def list_accounts(self, *, role: Optional[Role] = None) -> Sequence[Account]:
        raise NotImplementedError
