from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """Account roles used for access control."""

    ADMIN = "admin"
    LECTURER = "lecturer"
    STUDENT = "student"


class AttendanceStatus(str, Enum):
    """Status stored on a ledger record."""

    PRESENT = "present"
    ABSENT = "absent"


class StorageBackend(str, Enum):
    MYSQL = "mysql"
    MEMORY = "memory"
