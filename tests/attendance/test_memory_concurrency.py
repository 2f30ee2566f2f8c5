from __future__ import annotations

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from src.smart_attendance.smart_attendance.core.exceptions import (
    DuplicateAttendance,
    DuplicateEmail,
    DuplicateStudentId,
    StorageTimeout,
)
from src.smart_attendance.smart_attendance.roster.memory_student_repository import InMemoryStudentRepository

WRITERS = 16


def _race(fn):
    barrier = threading.Barrier(WRITERS)

    def run(i):
        barrier.wait()
        try:
            return fn(i)
        except Exception as exc:  # collected for assertions
            return exc

    with ThreadPoolExecutor(max_workers=WRITERS) as pool:
        return list(pool.map(run, range(WRITERS)))


def test_concurrent_marks_store_exactly_one(container, student_session):
    ledger = container.attendance_service
    results = _race(lambda i: ledger.mark_attendance(student_session, "CS101", "2024-05-01", name=f"scan {i}"))

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == WRITERS - 1
    assert all(isinstance(f, DuplicateAttendance) for f in failures)
    assert len(ledger.query_by_date(student_session, "2024-05-01")) == 1


def test_concurrent_adds_keep_student_id_unique(container, admin_session, student_fields):
    roster = container.roster_service
    results = _race(lambda i: roster.add_student(admin_session, student_fields("cs101" if i % 2 else "CS101")))

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == WRITERS - 1
    assert all(isinstance(f, DuplicateStudentId) for f in failures)
    assert roster.count_students() == 1


def test_concurrent_registrations_keep_email_unique(container):
    auth = container.auth_service
    results = _race(lambda i: auth.register("same@example.com", "secret1", f"User {i:02d}"))

    failures = [r for r in results if isinstance(r, Exception)]
    assert len(failures) == WRITERS - 1
    assert all(isinstance(f, DuplicateEmail) for f in failures)


def test_store_call_times_out_instead_of_hanging():
    repo = InMemoryStudentRepository(timeout_seconds=0.05)

    with repo.locked():
        with pytest.raises(StorageTimeout):
            repo.count()

    assert repo.count() == 0
