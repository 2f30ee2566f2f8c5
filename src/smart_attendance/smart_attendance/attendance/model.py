from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Thực thể miền (domain): Bản ghi điểm danh.

    ``date`` is kept in its YYYY-MM-DD string form; ``name`` is a snapshot taken
    when the record was marked and is not kept in sync with the roster.
    """

    attendance_id: int
    student_id: str
    date: str
    timestamp: datetime
    status: AttendanceStatus = AttendanceStatus.PRESENT
    name: Optional[str] = None
    time: Optional[str] = None
    confidence: Optional[float] = None

    def to_dict(self) -> dict:
        return {
            "id": self.attendance_id,
            "studentId": self.student_id,
            "name": self.name,
            "date": self.date,
            "time": self.time,
            "status": self.status.value,
            "confidence": self.confidence,
            "timestamp": self.timestamp.isoformat(),
        }


@dataclass(frozen=True)
class NewAttendance:
    """Validated input for a ledger insert."""

    student_id: str
    date: str
    timestamp: datetime
    status: AttendanceStatus = AttendanceStatus.PRESENT
    name: Optional[str] = None
    time: Optional[str] = None
    confidence: Optional[float] = None
