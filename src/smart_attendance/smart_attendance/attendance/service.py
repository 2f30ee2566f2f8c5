from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional, Sequence

from ..access.session import Session, require_authenticated
from ..common.datetime_utils import normalize_day, now_local, parse_timestamp, today_str
from ..common.validators import TextField, optional_confidence
from ..core.constants import (
    ATTENDANCE_TIME_MAX_LENGTH,
    STUDENT_ID_MAX_LENGTH,
    STUDENT_ID_MIN_LENGTH,
    STUDENT_TEXT_MAX_LENGTH,
)
from ..core.enums import AttendanceStatus
from ..core.exceptions import DuplicateAttendance, ValidationError
from ..recognition.base import FaceRecognizer
from ..roster.repository import StudentRepository
from ..roster.service import normalize_student_id
from .model import AttendanceRecord, NewAttendance
from .repository import AttendanceRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CaptureOutcome:
    matched: bool
    confidence: float
    record: Optional[AttendanceRecord] = None

    def to_dict(self) -> dict:
        out = {"matched": self.matched, "confidence": self.confidence}
        if self.record is not None:
            out["attendance"] = self.record.to_dict()
        return out


STUDENT_ID_RULE = TextField(
    "studentId", "Student ID", STUDENT_ID_MIN_LENGTH, STUDENT_ID_MAX_LENGTH, transform=normalize_student_id
)


def _optional_text(value: Any, label: str, max_len: int) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    if len(text) > max_len:
        raise ValidationError(f"{label} cannot exceed {max_len} characters")
    return text or None


def normalize_range(start_date: Any = None, end_date: Any = None) -> tuple[Optional[str], Optional[str]]:
    start = normalize_day(start_date, "Start date") if start_date not in (None, "") else None
    end = normalize_day(end_date, "End date") if end_date not in (None, "") else None
    if start and end and start > end:
        raise ValidationError("Start date must not be after end date")
    return start, end


class AttendanceService:
    """Append-only attendance ledger: one record per (student, day)."""

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        recognizer: Optional[FaceRecognizer] = None,
    ):
        self._attendance = attendance
        self._students = students
        self._recognizer = recognizer

    def mark_attendance(
        self,
        session: Session,
        student_id: Any,
        date: Any,
        *,
        name: Any = None,
        time: Any = None,
        confidence: Any = None,
        timestamp: Any = None,
    ) -> AttendanceRecord:
        require_authenticated(session)
        if not student_id or not date:
            raise ValidationError("Student ID and Date are required")

        student_id = STUDENT_ID_RULE.clean(student_id)
        entry_ts: datetime = parse_timestamp(timestamp) or now_local()
        entry = NewAttendance(
            student_id=student_id,
            date=normalize_day(date),
            name=_optional_text(name, "Name", STUDENT_TEXT_MAX_LENGTH),
            time=_optional_text(time, "Time", ATTENDANCE_TIME_MAX_LENGTH) or entry_ts.strftime("%H:%M:%S"),
            confidence=optional_confidence(confidence),
            timestamp=entry_ts,
            status=AttendanceStatus.PRESENT,
        )

        # Fast path for the common repeat-scan case; the store re-checks atomically.
        if self._attendance.get_for_student_and_date(entry.student_id, entry.date):
            raise DuplicateAttendance()

        record = self._attendance.create(entry)
        logger.info("Attendance marked: %s on %s (by account id=%s)", record.student_id, record.date, session.account_id)
        return record

    def mark_from_capture(self, session: Session, image: Any, *, date: Any = None) -> CaptureOutcome:
        require_authenticated(session)
        if self._recognizer is None:
            raise ValidationError("Face recognition is not configured")

        result = self._recognizer.recognize(image)
        if not result.matched or not result.student_id:
            logger.info("Capture did not match any student (confidence=%s)", result.confidence)
            return CaptureOutcome(matched=False, confidence=result.confidence)

        student = self._students.get_by_student_id(normalize_student_id(result.student_id))
        record = self.mark_attendance(
            session,
            result.student_id,
            date or today_str(),
            name=student.name if student else result.name,
            confidence=result.confidence,
        )
        return CaptureOutcome(matched=True, confidence=result.confidence, record=record)

    def query_by_date(self, session: Session, date: Any = None) -> Sequence[AttendanceRecord]:
        require_authenticated(session)
        day = normalize_day(date) if date not in (None, "") else None
        return self._attendance.list_by_date(day)

    def query_by_range(
        self,
        session: Session,
        start_date: Any = None,
        end_date: Any = None,
    ) -> Sequence[AttendanceRecord]:
        require_authenticated(session)
        start, end = normalize_range(start_date, end_date)
        return self._attendance.list_by_range(start_date=start, end_date=end)
