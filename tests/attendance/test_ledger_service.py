from __future__ import annotations

from datetime import date, datetime

import pytest

from src.smart_attendance.smart_attendance.access.session import Session
from src.smart_attendance.smart_attendance.core.enums import AttendanceStatus
from src.smart_attendance.smart_attendance.core.exceptions import (
    DuplicateAttendance,
    Unauthorized,
    ValidationError,
)


def test_mark_twice_same_day_keeps_one_record(container, student_session):
    ledger = container.attendance_service

    first = ledger.mark_attendance(student_session, "CS101", "2024-05-01", name="Alice")
    with pytest.raises(DuplicateAttendance):
        ledger.mark_attendance(student_session, "CS101", "2024-05-01", name="Alice again")

    records = ledger.query_by_date(student_session, "2024-05-01")
    assert len(records) == 1
    assert records[0] == first
    assert records[0].name == "Alice"


def test_mark_defaults(container, student_session, fixed_now, monkeypatch):
    from src.smart_attendance.smart_attendance.attendance import service as attendance_service

    monkeypatch.setattr(attendance_service, "now_local", lambda: fixed_now)

    record = container.attendance_service.mark_attendance(student_session, "cs101", date(2024, 5, 1))

    assert record.student_id == "CS101"
    assert record.date == "2024-05-01"
    assert record.status == AttendanceStatus.PRESENT
    assert record.timestamp == fixed_now
    assert record.time == "08:30:00"
    assert record.confidence is None


def test_mark_keeps_supplied_fields(container, lecturer_session):
    record = container.attendance_service.mark_attendance(
        lecturer_session,
        "CS101",
        "2024-05-01",
        name="Alice",
        time="9:15:02 AM",
        confidence="0.87",
        timestamp="2024-05-01T09:15:02",
    )

    assert record.time == "9:15:02 AM"
    assert record.confidence == pytest.approx(0.87)
    assert record.timestamp == datetime(2024, 5, 1, 9, 15, 2)
    assert record.to_dict()["status"] == "present"


@pytest.mark.parametrize(
    "student_id,day,extra",
    [
        ("", "2024-05-01", {}),
        ("CS101", "", {}),
        ("CS101", None, {}),
        ("CS101", "2024-02-30", {}),
        ("CS101", "01/05/2024", {}),
        ("CS101", "2024-05-01", {"confidence": 1.5}),
        ("CS101", "2024-05-01", {"confidence": "high"}),
        ("CS101", "2024-05-01", {"timestamp": "yesterday"}),
        ("X" * 40, "2024-05-01", {}),
        ("AB", "2024-05-01", {}),
        ("CS101", "2024-05-01", {"name": "N" * 101}),
        ("CS101", "2024-05-01", {"time": "T" * 33}),
    ],
)
def test_mark_validation_never_writes(container, student_session, student_id, day, extra):
    with pytest.raises(ValidationError):
        container.attendance_service.mark_attendance(student_session, student_id, day, **extra)
    assert container.attendance_service.query_by_date(student_session) == []


def test_ledger_requires_session(container):
    with pytest.raises(Unauthorized):
        container.attendance_service.mark_attendance(Session.anonymous(), "CS101", "2024-05-01")
    with pytest.raises(Unauthorized):
        container.attendance_service.query_by_date(Session.anonymous())


def test_query_by_date_newest_first(container, student_session):
    ledger = container.attendance_service
    ledger.mark_attendance(student_session, "CS101", "2024-05-01", timestamp="2024-05-01T08:00:00")
    ledger.mark_attendance(student_session, "CS102", "2024-05-01", timestamp="2024-05-01T09:00:00")
    ledger.mark_attendance(student_session, "CS101", "2024-05-02", timestamp="2024-05-02T08:00:00")

    assert [r.student_id for r in ledger.query_by_date(student_session, "2024-05-01")] == ["CS102", "CS101"]
    assert len(ledger.query_by_date(student_session)) == 3
    assert ledger.query_by_date(student_session, "2024-05-03") == []


def test_query_by_range_is_inclusive_and_open_ended(container, student_session):
    ledger = container.attendance_service
    for day in ("2024-04-30", "2024-05-01", "2024-05-04", "2024-05-07", "2024-05-08"):
        ledger.mark_attendance(student_session, "CS101", day, timestamp=f"{day}T08:00:00")

    def days(records):
        return sorted(r.date for r in records)

    assert days(ledger.query_by_range(student_session, "2024-05-01", "2024-05-07")) == [
        "2024-05-01",
        "2024-05-04",
        "2024-05-07",
    ]
    assert days(ledger.query_by_range(student_session, start_date="2024-05-07")) == ["2024-05-07", "2024-05-08"]
    assert days(ledger.query_by_range(student_session, end_date="2024-04-30")) == ["2024-04-30"]
    assert len(ledger.query_by_range(student_session)) == 5

    with pytest.raises(ValidationError):
        ledger.query_by_range(student_session, "2024-05-07", "2024-05-01")


def test_removing_student_keeps_history(container, admin_session, student_fields):
    student = container.roster_service.add_student(admin_session, student_fields("CS101"))
    record = container.attendance_service.mark_attendance(admin_session, "CS101", "2024-05-01", name="Alice")

    container.roster_service.remove_student(admin_session, student.id)

    assert container.attendance_service.query_by_date(admin_session, "2024-05-01") == [record]
