from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from ..core.enums import Role
from ..core.exceptions import DuplicateEmail
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Account
from .repository import AccountRepository

_COLUMNS = "account_id, full_name, email, password_hash, role, is_active, last_login_at, created_at"


def _to_account(row: dict) -> Account:
    return Account(
        account_id=int(row["account_id"]),
        full_name=row["full_name"],
        email=row["email"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        is_active=bool(row.get("is_active", True)),
        last_login_at=row.get("last_login_at"),
        created_at=row.get("created_at"),
    )


class MySQLAccountRepository(AccountRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, account_id: int) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def get_by_email(self, email: str) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE email=%s", (email.lower(),))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def create_account(
        self,
        *,
        full_name: str,
        email: str,
        password_hash: str,
        role: Role,
    ) -> Account:
        # uq_accounts_email settles races between concurrent registrations
        with db_cursor(self._conn_factory, duplicate=DuplicateEmail) as (_, cur):
            cur.execute(
                """
                INSERT INTO accounts(full_name, email, password_hash, role, is_active)
                VALUES(%s,%s,%s,%s,1)
                """,
                (full_name, email.lower(), password_hash, role.value),
            )
            account_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (account_id,))
            return _to_account(fetchone(cur))

    def update_last_login(self, account_id: int, *, at: datetime) -> Optional[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("UPDATE accounts SET last_login_at=%s WHERE account_id=%s", (at, int(account_id)))
            cur.execute(f"SELECT {_COLUMNS} FROM accounts WHERE account_id=%s", (int(account_id),))
            row = fetchone(cur)
            return _to_account(row) if row else None

    def update_password_hash(self, account_id: int, *, password_hash: str) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE accounts SET password_hash=%s WHERE account_id=%s",
                (password_hash, int(account_id)),
            )
            return cur.rowcount > 0

    def set_active(self, account_id: int, *, is_active: bool) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "UPDATE accounts SET is_active=%s WHERE account_id=%s",
                (1 if is_active else 0, int(account_id)),
            )
            # rowcount is 0 when the flag already had this value, so check existence too
            if cur.rowcount > 0:
                return True
            cur.execute("SELECT 1 AS found FROM accounts WHERE account_id=%s", (int(account_id),))
            return fetchone(cur) is not None

    def list_accounts(self, *, role: Optional[Role] = None) -> Sequence[Account]:
        with db_cursor(self._conn_factory) as (_, cur):
            if role is None:
                cur.execute(f"SELECT {_COLUMNS} FROM accounts ORDER BY created_at DESC, account_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM accounts WHERE role=%s ORDER BY created_at DESC, account_id DESC",
                    (role.value,),
                )
            return [_to_account(r) for r in fetchall(cur)]
