from __future__ import annotations

from typing import Optional, Sequence

from ..core.exceptions import DuplicateAttendance
from ..database.memory_base import InMemoryStore
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository


def _newest_first(records) -> list[AttendanceRecord]:
    return sorted(records, key=lambda r: (r.timestamp, r.attendance_id), reverse=True)


class InMemoryAttendanceRepository(InMemoryStore, AttendanceRepository):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._by_student_date: dict[tuple[str, str], AttendanceRecord] = {}

    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        with self.locked():
            return self._by_student_date.get((student_id, date))

    def create(self, entry: NewAttendance) -> AttendanceRecord:
        key = (entry.student_id, entry.date)
        with self.locked():
            if key in self._by_student_date:
                raise DuplicateAttendance()
            record = AttendanceRecord(
                attendance_id=self.next_id(),
                student_id=entry.student_id,
                name=entry.name,
                date=entry.date,
                time=entry.time,
                status=entry.status,
                confidence=entry.confidence,
                timestamp=entry.timestamp,
            )
            self._by_student_date[key] = record
            return record

    def list_by_date(self, date: Optional[str] = None) -> Sequence[AttendanceRecord]:
        with self.locked():
            items = [r for r in self._by_student_date.values() if date is None or r.date == date]
        return _newest_first(items)

    def list_by_range(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        # YYYY-MM-DD strings order the same way as the dates they encode
        with self.locked():
            items = [
                r
                for r in self._by_student_date.values()
                if (start_date is None or r.date >= start_date) and (end_date is None or r.date <= end_date)
            ]
        return _newest_first(items)
