from __future__ import annotations

import csv
import io
from dataclasses import dataclass, field
from typing import Any, Optional, Sequence

from ..access.session import Session, require_authenticated
from ..attendance.model import AttendanceRecord
from ..attendance.repository import AttendanceRepository
from ..attendance.service import normalize_range
from ..common.datetime_utils import normalize_day
from ..core.enums import AttendanceStatus
from ..roster.repository import StudentRepository

CSV_FIELDS = ["date", "time", "studentId", "name", "status", "confidence", "timestamp"]


def attendance_rate(present: int, students: int) -> float:
    """Present count as a percentage of the roster, 2 decimals; 0 for an empty roster."""

    if students <= 0:
        return 0
    return round(present / students * 100, 2)


@dataclass(frozen=True)
class AttendanceStats:
    total_present: int
    total_students: int
    average_attendance_percent: float
    start_date: Optional[str] = None
    end_date: Optional[str] = None
    records: Sequence[AttendanceRecord] = field(default_factory=tuple)

    def to_dict(self, *, include_records: bool = False) -> dict:
        out = {
            "totalPresent": self.total_present,
            "totalStudents": self.total_students,
            "averageAttendancePercent": self.average_attendance_percent,
            # key used by the existing dashboard client
            "averageAttendance": self.average_attendance_percent,
            "startDate": self.start_date,
            "endDate": self.end_date,
        }
        if include_records:
            out["records"] = [r.to_dict() for r in self.records]
        return out


class ReportService:
    """Read-only aggregates over the ledger and the roster.

    Storage failures propagate; stats are never zeroed to hide a failed read.
    """

    def __init__(self, attendance: AttendanceRepository, students: StudentRepository):
        self._attendance = attendance
        self._students = students

    def _build(self, records: Sequence[AttendanceRecord], *, start: Optional[str], end: Optional[str]) -> AttendanceStats:
        present = sum(1 for r in records if r.status == AttendanceStatus.PRESENT)
        total_students = self._students.count()
        return AttendanceStats(
            total_present=present,
            total_students=total_students,
            average_attendance_percent=attendance_rate(present, total_students),
            start_date=start,
            end_date=end,
            records=tuple(records),
        )

    def daily_stats(self, session: Session, date: Any) -> AttendanceStats:
        require_authenticated(session)
        day = normalize_day(date)
        return self._build(self._attendance.list_by_date(day), start=day, end=day)

    def range_stats(self, session: Session, start_date: Any = None, end_date: Any = None) -> AttendanceStats:
        require_authenticated(session)
        start, end = normalize_range(start_date, end_date)
        records = self._attendance.list_by_range(start_date=start, end_date=end)
        return self._build(records, start=start, end=end)

    def export_csv(self, session: Session, start_date: Any = None, end_date: Any = None) -> str:
        require_authenticated(session)
        start, end = normalize_range(start_date, end_date)
        records = self._attendance.list_by_range(start_date=start, end_date=end)

        out = io.StringIO()
        writer = csv.DictWriter(out, fieldnames=CSV_FIELDS, extrasaction="ignore")
        writer.writeheader()
        for r in sorted(records, key=lambda x: (x.date, x.timestamp)):
            row = r.to_dict()
            row["confidence"] = "" if r.confidence is None else r.confidence
            writer.writerow(row)
        return out.getvalue()
