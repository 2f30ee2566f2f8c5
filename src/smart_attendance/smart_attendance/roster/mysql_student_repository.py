from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import DuplicateStudentId
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student
from .repository import StudentRepository

_COLUMNS = "id, student_id, name, faculty, department, year, semester, created_at, updated_at"


def _to_student(row: dict) -> Student:
    return Student(
        id=int(row["id"]),
        student_id=row["student_id"],
        name=row["name"],
        faculty=row["faculty"],
        department=row["department"],
        year=int(row["year"]),
        semester=int(row["semester"]),
        created_at=row.get("created_at"),
        updated_at=row.get("updated_at"),
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(id),))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (student_id,))
            row = fetchone(cur)
            return _to_student(row) if row else None

    def create(self, fields: dict) -> Student:
        with db_cursor(self._conn_factory, duplicate=DuplicateStudentId) as (_, cur):
            cur.execute(
                """
                INSERT INTO students(student_id, name, faculty, department, year, semester)
                VALUES(%s,%s,%s,%s,%s,%s)
                """,
                (
                    fields["student_id"],
                    fields["name"],
                    fields["faculty"],
                    fields["department"],
                    int(fields["year"]),
                    int(fields["semester"]),
                ),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (new_id,))
            return _to_student(fetchone(cur))

    def update(self, id: int, fields: dict) -> Optional[Student]:
        with db_cursor(self._conn_factory, duplicate=DuplicateStudentId) as (_, cur):
            cur.execute("SELECT id FROM students WHERE id=%s FOR UPDATE", (int(id),))
            if not fetchone(cur):
                return None
            cur.execute(
                """
                UPDATE students
                SET student_id=%s, name=%s, faculty=%s, department=%s, year=%s, semester=%s
                WHERE id=%s
                """,
                (
                    fields["student_id"],
                    fields["name"],
                    fields["faculty"],
                    fields["department"],
                    int(fields["year"]),
                    int(fields["semester"]),
                    int(id),
                ),
            )
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE id=%s", (int(id),))
            return _to_student(fetchone(cur))

    def delete_by_id(self, id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE id=%s", (int(id),))
            return cur.rowcount > 0

    def list_all(self) -> Sequence[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students ORDER BY created_at DESC, id DESC")
            return [_to_student(r) for r in fetchall(cur)]

    def count(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS total FROM students")
            row = fetchone(cur)
            return int(row["total"]) if row else 0
