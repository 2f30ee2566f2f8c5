from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import AttendanceRecord, NewAttendance


class AttendanceRepository(Protocol):
    """Append-only ledger.

    ``create`` raises DuplicateAttendance when a record for (student_id, date)
    already exists; the existing record is never overwritten.
    """

    def get_for_student_and_date(self, student_id: str, date: str) -> Optional[AttendanceRecord]:
        raise NotImplementedError

    def create(self, entry: NewAttendance) -> AttendanceRecord:
        raise NotImplementedError

    def list_by_date(self, date: Optional[str] = None) -> Sequence[AttendanceRecord]:
        """All records (or one day's), newest timestamp first."""
        raise NotImplementedError

    def list_by_range(
        self,
        *,
        start_date: Optional[str] = None,
        end_date: Optional[str] = None,
    ) -> Sequence[AttendanceRecord]:
        """Inclusive on both ends; a missing bound is open on that side."""
        raise NotImplementedError
