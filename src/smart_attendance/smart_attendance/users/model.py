from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import Role


@dataclass(frozen=True)
class Account:
    """Thực thể miền (domain): Account.

    Lưu ý: Đây là đối tượng dữ liệu thuần (không chứa code truy cập DB).
    """

    account_id: int
    full_name: str
    email: str
    password_hash: str
    role: Role
    is_active: bool = True
    last_login_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def to_public_dict(self) -> dict:
        """External representation; password material is never included."""

        return {
            "id": self.account_id,
            "email": self.email,
            "fullName": self.full_name,
            "role": self.role.value,
            "isActive": self.is_active,
            "lastLogin": self.last_login_at.isoformat() if self.last_login_at else None,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
