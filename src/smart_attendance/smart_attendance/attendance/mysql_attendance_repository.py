from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateAttendance
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

_COLUMNS = "attendance_id, student_id, name, date, time, status, confidence, timestamp"


def _to_record(r: dict) -> AttendanceRecord:
    confidence = r.get("confidence")
    return AttendanceRecord(
        attendance_id=int(r["attendance_id"]),
        student_id=r["student_id"],
        name=r.get("name"),
        date=str(r["date"]),
        time=r.get("time"),
        status=AttendanceStatus(r["status"]),
        confidence=float(confidence) if confidence is not None else None,
        timestamp=r["timestamp"],
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND date=%s
                """,
                (student_id, date),
            )
            r = fetchone(cur)
            return _to_record(r) if r else None

    def create(self, entry: NewAttendance) -> AttendanceRecord:
        # uq_attendance_student_date is what actually guards concurrent marks
        with db_cursor(self._conn_factory, duplicate=DuplicateAttendance) as (_, cur):
            cur.execute(
                """
                INSERT INTO attendance_records(student_id, name, date, time, status, confidence, timestamp)
                VALUES(%s,%s,%s,%s,%s,%s,%s)
                """,
                (
                    entry.student_id,
                    entry.name,
                    entry.date,
                    entry.time,
                    entry.status.value,
                    entry.confidence,
                    entry.timestamp,
                ),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM attendance_records WHERE attendance_id=%s", (new_id,))
            return _to_record(fetchone(cur))

    def list_by_date(self, date: Optional[str] = None) -> Sequence[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            if date is None:
                cur.execute(f"SELECT {_COLUMNS} FROM attendance_records ORDER BY timestamp DESC, attendance_id DESC")
            else:
                cur.execute(
                    f"SELECT {_COLUMNS} FROM attendance_records WHERE date=%s ORDER BY timestamp DESC, attendance_id DESC",
                    (date,),
                )
            return [_to_record(r) for r in fetchall(cur)]

    def list_by_range(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        clauses: list[str] = []
        params: list[object] = []

        if start_date is not None:
            clauses.append("date >= %s")
            params.append(start_date)
        if end_date is not None:
            clauses.append("date <= %s")
            params.append(end_date)

        where = f"WHERE {' AND '.join(clauses)}" if clauses else ""

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                {where}
                ORDER BY timestamp DESC, attendance_id DESC
                """,
                tuple(params),
            )
            return [_to_record(r) for r in fetchall(cur)]
