from __future__ import annotations

from datetime import datetime

import pytest

import config.testing as testing_settings
from src.smart_attendance.smart_attendance.access.session import Session
from src.smart_attendance.smart_attendance.container import build_container
from src.smart_attendance.smart_attendance.core.enums import Role
from src.smart_attendance.smart_attendance.main import create_app


@pytest.fixture
def fixed_now():
    return datetime(2024, 5, 1, 8, 30, 0)


@pytest.fixture
def container():
    return build_container(backend="memory", timeout_seconds=2)


@pytest.fixture
def admin_session():
    return Session(account_id=1, role=Role.ADMIN)


@pytest.fixture
def lecturer_session():
    return Session(account_id=2, role=Role.LECTURER)


@pytest.fixture
def student_session():
    return Session(account_id=3, role=Role.STUDENT)


@pytest.fixture
def student_fields():
    def _make(student_id="cs101", **overrides):
        fields = {
            "studentId": student_id,
            "name": "Alice",
            "faculty": "Eng",
            "department": "CS",
            "year": 1,
            "semester": 1,
        }
        fields.update(overrides)
        return fields

    return _make


@pytest.fixture
def app():
    return create_app(testing_settings)


@pytest.fixture
def client(app):
    return app.test_client()
