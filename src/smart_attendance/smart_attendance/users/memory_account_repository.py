from __future__ import annotations

from dataclasses import replace
from datetime import datetime
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import Role
from ..core.exceptions import DuplicateEmail
from ..database.memory_base import InMemoryStore
from .model import Account
from .repository import AccountRepository


class InMemoryAccountRepository(InMemoryStore, AccountRepository):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._by_id: dict[int, Account] = {}
        self._id_by_email: dict[str, int] = {}

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with self.locked():
            return self._by_id.get(int(account_id))

    def get_by_email(self, email: str) -> Optional[Account]:
        with self.locked():
            account_id = self._id_by_email.get(email.lower())
            return self._by_id.get(account_id) if account_id is not None else None

    def create_account(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> Account:
        email = email.lower()
        with self.locked():
            if email in self._id_by_email:
                raise DuplicateEmail()
            account = Account(
                account_id=self.next_id(),
                full_name=full_name,
                email=email,
                password_hash=password_hash,
                role=role,
                is_active=True,
                created_at=now_local(),
            )
            self._by_id[account.account_id] = account
            self._id_by_email[email] = account.account_id
            return account

    def update_last_login(self, account_id: int, *, at: datetime) -> Optional[Account]:
        with self.locked():
            account = self._by_id.get(int(account_id))
            if account is None:
                return None
            account = replace(account, last_login_at=at)
            self._by_id[account.account_id] = account
            return account

    def update_password_hash(self, account_id: int, *, password_hash: str) -> bool:
        with self.locked():
            account = self._by_id.get(int(account_id))
            if account is None:
                return False
            self._by_id[account.account_id] = replace(account, password_hash=password_hash)
            return True

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        with self.locked():
            account = self._by_id.get(int(account_id))
            if account is None:
                return False
            self._by_id[account.account_id] = replace(account, is_active=bool(is_active))
            return True

    def list_accounts(self, *, role: Optional[Role] = None) -> Sequence[Account]:
        with self.locked():
            items = [a for a in self._by_id.values() if role is None or a.role == role]
        items.sort(key=lambda a: (a.created_at, a.account_id), reverse=True)
        return items
