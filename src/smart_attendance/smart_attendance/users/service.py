from __future__ import annotations

import logging
from typing import Optional, Sequence, Union

from werkzeug.security import check_password_hash, generate_password_hash

from ..access.session import Session, require_admin, require_authenticated
from ..common.datetime_utils import now_local
from ..common.validators import TextField, require_email, require_min_length, require_non_empty
from ..core.constants import FULL_NAME_MAX_LENGTH, FULL_NAME_MIN_LENGTH, PASSWORD_MIN_LENGTH
from ..core.enums import Role
from ..core.exceptions import (
    AccountInactive,
    DuplicateEmail,
    InvalidCredentials,
    NotFound,
    ValidationError,
)
from .model import Account
from .repository import AccountRepository

logger = logging.getLogger(__name__)

FULL_NAME_RULE = TextField("fullName", "Full name", FULL_NAME_MIN_LENGTH, FULL_NAME_MAX_LENGTH)


def parse_role(value: Union[str, Role, None], *, default: Role = Role.STUDENT) -> Role:
    if value is None or value == "":
        return default
    try:
        return Role(str(getattr(value, "value", value)).strip().lower())
    except ValueError:
        raise ValidationError(f"{value} is not a valid role")


def _verify_password(password_hash: str, password: str) -> bool:
    try:
        return check_password_hash(password_hash, password or "")
    except (TypeError, ValueError):
        # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
        return False


class AuthService:
    """Use case: register and authenticate accounts."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def register(
        self,
        email: str,
        password: str,
        full_name: str,
        role: Union[str, Role, None] = None,
    ) -> Account:
        if not email or not password or not full_name:
            raise ValidationError("Email, password, and full name are required")

        email = require_email(email)
        require_min_length(password, "Password", PASSWORD_MIN_LENGTH)
        full_name = FULL_NAME_RULE.clean(full_name)
        role = parse_role(role)

        if self._accounts.get_by_email(email):
            raise DuplicateEmail()

        account = self._accounts.create_account(
            full_name=full_name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
        )
        logger.info("Registered %s account id=%s", account.role.value, account.account_id)
        return account

    def authenticate(self, email: str, password: str) -> Account:
        if not email or not password:
            raise ValidationError("Email and password are required")

        account = self._accounts.get_by_email(str(email).strip().lower())
        if not account or not _verify_password(account.password_hash, password):
            raise InvalidCredentials()

        if not account.is_active:
            raise AccountInactive()

        updated = self._accounts.update_last_login(account.account_id, at=now_local())
        logger.info("Account id=%s logged in", account.account_id)
        return updated or account


class UserService:
    """Use case: self-service and admin management of accounts."""

    def __init__(self, accounts: AccountRepository):
        self._accounts = accounts

    def get_current(self, session: Session) -> Account:
        session = require_authenticated(session)
        account = self._accounts.get_by_id(session.account_id)
        if not account:
            raise NotFound("Account not found")
        return account

    def change_password(self, session: Session, *, old_password: str, new_password: str) -> None:
        account = self.get_current(session)
        require_non_empty(old_password, "Current password")
        require_min_length(new_password, "New password", PASSWORD_MIN_LENGTH)

        if not _verify_password(account.password_hash, old_password):
            raise InvalidCredentials("Current password is incorrect")

        self._accounts.update_password_hash(account.account_id, password_hash=generate_password_hash(new_password))
        logger.info("Account id=%s changed password", account.account_id)

    def list_accounts(self, session: Session, *, role: Optional[Union[str, Role]] = None) -> Sequence[Account]:
        require_admin(session)
        role_filter = parse_role(role, default=None) if role else None
        return self._accounts.list_accounts(role=role_filter)

    def set_active(self, session: Session, *, account_id: int, is_active: bool) -> Account:
        session = require_admin(session)
        if int(account_id) == session.account_id and not is_active:
            raise ValidationError("You cannot deactivate your own account")

        if not self._accounts.set_active(int(account_id), is_active=bool(is_active)):
            raise NotFound("Account not found")
        logger.info("Account id=%s is_active=%s (by admin id=%s)", account_id, bool(is_active), session.account_id)
        return self._accounts.get_by_id(int(account_id))
