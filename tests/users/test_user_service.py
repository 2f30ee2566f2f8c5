from __future__ import annotations

import pytest

from src.smart_attendance.smart_attendance.access.session import Session
from src.smart_attendance.smart_attendance.core.exceptions import (
    Forbidden,
    InvalidCredentials,
    NotFound,
    Unauthorized,
    ValidationError,
)
from src.smart_attendance.smart_attendance.users.memory_account_repository import InMemoryAccountRepository
from src.smart_attendance.smart_attendance.users.service import AuthService, UserService


@pytest.fixture
def accounts():
    return InMemoryAccountRepository()


@pytest.fixture
def auth(accounts):
    return AuthService(accounts)


@pytest.fixture
def users(accounts):
    return UserService(accounts)


def test_change_password_rehashes(auth, users, accounts):
    account = auth.register("a@example.com", "secret1", "Alice")
    old_hash = accounts.get_by_id(account.account_id).password_hash

    users.change_password(Session.for_account(account), old_password="secret1", new_password="secret2")

    assert accounts.get_by_id(account.account_id).password_hash != old_hash
    assert auth.authenticate("a@example.com", "secret2").account_id == account.account_id
    with pytest.raises(InvalidCredentials):
        auth.authenticate("a@example.com", "secret1")


def test_change_password_requires_current_password(auth, users):
    account = auth.register("a@example.com", "secret1", "Alice")

    with pytest.raises(InvalidCredentials):
        users.change_password(Session.for_account(account), old_password="nope", new_password="secret2")


def test_change_password_rejects_non_string(auth, users):
    account = auth.register("a@example.com", "secret1", "Alice")

    with pytest.raises(ValidationError):
        users.change_password(Session.for_account(account), old_password="secret1", new_password=12345678)


def test_list_accounts_admin_only(auth, users):
    admin = auth.register("admin@example.com", "admin123", "Admin User", "admin")
    student = auth.register("s@example.com", "student123", "Student User")

    assert len(users.list_accounts(Session.for_account(admin))) == 2
    assert [a.email for a in users.list_accounts(Session.for_account(admin), role="student")] == ["s@example.com"]

    with pytest.raises(Forbidden):
        users.list_accounts(Session.for_account(student))
    with pytest.raises(Unauthorized):
        users.list_accounts(Session.anonymous())


def test_set_active(auth, users):
    admin = auth.register("admin@example.com", "admin123", "Admin User", "admin")
    student = auth.register("s@example.com", "student123", "Student User")

    updated = users.set_active(Session.for_account(admin), account_id=student.account_id, is_active=False)
    assert updated.is_active is False

    with pytest.raises(NotFound):
        users.set_active(Session.for_account(admin), account_id=999, is_active=True)
    with pytest.raises(ValidationError):
        users.set_active(Session.for_account(admin), account_id=admin.account_id, is_active=False)
