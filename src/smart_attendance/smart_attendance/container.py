from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Union

from .attendance.memory_attendance_repository import InMemoryAttendanceRepository
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.repository import AttendanceRepository
from .attendance.service import AttendanceService
from .core.constants import DEFAULT_MATCH_PROBABILITY, DEFAULT_STORE_TIMEOUT_SECONDS
from .core.enums import StorageBackend
from .database.connection import DBConfig, DatabaseConnection
from .recognition.base import FaceRecognizer
from .recognition.random_recognizer import RandomRosterRecognizer
from .reports.service import ReportService
from .roster.memory_student_repository import InMemoryStudentRepository
from .roster.mysql_student_repository import MySQLStudentRepository
from .roster.repository import StudentRepository
from .roster.service import RosterService
from .users.memory_account_repository import InMemoryAccountRepository
from .users.mysql_account_repository import MySQLAccountRepository
from .users.repository import AccountRepository
from .users.service import AuthService, UserService


@dataclass(frozen=True)
class Container:
    backend: StorageBackend
    conn: Optional[DatabaseConnection]

    accounts_repo: AccountRepository
    students_repo: StudentRepository
    attendance_repo: AttendanceRepository
    recognizer: FaceRecognizer

    auth_service: AuthService
    user_service: UserService
    roster_service: RosterService
    attendance_service: AttendanceService
    report_service: ReportService


def build_container(
    *,
    db_config: Optional[dict] = None,
    backend: Union[str, StorageBackend] = StorageBackend.MYSQL,
    timeout_seconds: float = DEFAULT_STORE_TIMEOUT_SECONDS,
    match_probability: float = DEFAULT_MATCH_PROBABILITY,
    recognizer: Optional[FaceRecognizer] = None,
) -> Container:
    backend = StorageBackend(backend)
    conn: Optional[DatabaseConnection] = None

    if backend == StorageBackend.MYSQL:
        if not db_config:
            raise ValueError("db_config is required for the mysql backend")
        config = DBConfig(
            host=str(db_config["host"]),
            port=int(db_config.get("port", 3306)),
            user=str(db_config["user"]),
            password=str(db_config["password"]),
            database=str(db_config["database"]),
            timeout_seconds=float(timeout_seconds),
        )
        conn = DatabaseConnection.get_instance(config)
        accounts_repo = MySQLAccountRepository(conn)
        students_repo = MySQLStudentRepository(conn)
        attendance_repo = MySQLAttendanceRepository(conn)
    else:
        accounts_repo = InMemoryAccountRepository(timeout_seconds=timeout_seconds)
        students_repo = InMemoryStudentRepository(timeout_seconds=timeout_seconds)
        attendance_repo = InMemoryAttendanceRepository(timeout_seconds=timeout_seconds)

    recognizer = recognizer or RandomRosterRecognizer(students_repo, match_probability=match_probability)

    return Container(
        backend=backend,
        conn=conn,
        accounts_repo=accounts_repo,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        recognizer=recognizer,
        auth_service=AuthService(accounts_repo),
        user_service=UserService(accounts_repo),
        roster_service=RosterService(students_repo),
        attendance_service=AttendanceService(attendance_repo, students_repo, recognizer=recognizer),
        report_service=ReportService(attendance_repo, students_repo),
    )
