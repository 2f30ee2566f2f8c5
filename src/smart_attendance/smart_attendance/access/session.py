from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Mapping, Optional

from ..core.enums import Role
from ..core.exceptions import AccountInactive, Forbidden, Unauthorized


@dataclass(frozen=True)
class Session:
    """Authenticated context passed explicitly into access-controlled calls.

    ``account_id is None`` means Anonymous; anything else is Authenticated(role).
    """

    account_id: Optional[int] = None
    role: Optional[Role] = None

    @classmethod
    def anonymous(cls) -> "Session":
        return cls()

    @classmethod
    def for_account(cls, account) -> "Session":
        return cls(account_id=int(account.account_id), role=Role(account.role))

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> "Session":
        """Rebuild from the Flask cookie session (or any dict with the same keys)."""

        account_id = data.get("account_id")
        role = data.get("role")
        if account_id is None or role is None:
            return cls.anonymous()
        try:
            return cls(account_id=int(account_id), role=Role(role))
        except ValueError:
            # Tampered or stale cookie data: treat as logged out.
            return cls.anonymous()

    def to_mapping(self) -> dict:
        if not self.is_authenticated:
            return {}
        return {"account_id": self.account_id, "role": self.role.value}

    @property
    def is_authenticated(self) -> bool:
        return self.account_id is not None and self.role is not None

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def refresh_session(session: Session, accounts) -> Session:
    """Re-check a cookie session against the stored account.

    The role always comes from the account, so role changes and deactivation
    apply to sessions that are already logged in.
    """

    if not session.is_authenticated:
        return session
    account = accounts.get_by_id(session.account_id)
    if account is None:
        return Session.anonymous()
    if not account.is_active:
        raise AccountInactive()
    return Session.for_account(account)


def require_authenticated(session: Optional[Session]) -> Session:
    if session is None or not session.is_authenticated:
        raise Unauthorized()
    return session


def require_role(session: Optional[Session], *roles: Role) -> Session:
    session = require_authenticated(session)
    if session.role not in roles:
        raise Forbidden()
    return session


def require_admin(session: Optional[Session]) -> Session:
    return require_role(session, Role.ADMIN)
