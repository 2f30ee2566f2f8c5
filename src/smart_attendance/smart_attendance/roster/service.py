from __future__ import annotations

import logging
from typing import Mapping, Sequence

from ..access.session import Session, require_admin, require_authenticated
from ..common.validators import IntField, TextField, validate_fields
from ..core.constants import (
    SEMESTER_MAX,
    SEMESTER_MIN,
    STUDENT_ID_MAX_LENGTH,
    STUDENT_ID_MIN_LENGTH,
    STUDENT_TEXT_MAX_LENGTH,
    STUDENT_TEXT_MIN_LENGTH,
    YEAR_MAX,
    YEAR_MIN,
)
from ..core.exceptions import DuplicateStudentId, NotFound
from .model import Student
from .repository import StudentRepository

logger = logging.getLogger(__name__)


def normalize_student_id(value: str) -> str:
    return str(value).strip().upper()


STUDENT_RULES = (
    TextField(
        "studentId",
        "Student ID",
        STUDENT_ID_MIN_LENGTH,
        STUDENT_ID_MAX_LENGTH,
        transform=normalize_student_id,
        attr="student_id",
    ),
    TextField("name", "Name", STUDENT_TEXT_MIN_LENGTH, STUDENT_TEXT_MAX_LENGTH),
    TextField("faculty", "Faculty", STUDENT_TEXT_MIN_LENGTH, STUDENT_TEXT_MAX_LENGTH),
    TextField("department", "Department", STUDENT_TEXT_MIN_LENGTH, STUDENT_TEXT_MAX_LENGTH),
    IntField("year", "Year", YEAR_MIN, YEAR_MAX),
    IntField("semester", "Semester", SEMESTER_MIN, SEMESTER_MAX),
)


class RosterService:
    """Use case: manage the student roster.

    Reads are open to any authenticated role; mutations are admin-only.
    """

    def __init__(self, students: StudentRepository):
        self._students = students

    def add_student(self, session: Session, fields: Mapping) -> Student:
        session = require_admin(session)
        data = validate_fields(STUDENT_RULES, fields)

        if self._students.get_by_student_id(data["student_id"]):
            raise DuplicateStudentId()

        student = self._students.create(data)
        logger.info("Student %s added (id=%s) by account id=%s", student.student_id, student.id, session.account_id)
        return student

    def update_student(self, session: Session, id: int, fields: Mapping) -> Student:
        session = require_admin(session)
        data = validate_fields(STUDENT_RULES, fields)

        existing = self._students.get_by_student_id(data["student_id"])
        if existing and existing.id != int(id):
            raise DuplicateStudentId()

        student = self._students.update(int(id), data)
        if not student:
            raise NotFound("Student not found")
        logger.info("Student id=%s updated by account id=%s", student.id, session.account_id)
        return student

    def remove_student(self, session: Session, id: int) -> None:
        session = require_admin(session)
        # Ledger entries are historical and stay in place.
        if not self._students.delete_by_id(int(id)):
            raise NotFound("Student not found")
        logger.info("Student id=%s removed by account id=%s", id, session.account_id)

    def get_student(self, session: Session, id: int) -> Student:
        require_authenticated(session)
        student = self._students.get_by_id(int(id))
        if not student:
            raise NotFound("Student not found")
        return student

    def list_students(self, session: Session) -> Sequence[Student]:
        require_authenticated(session)
        return self._students.list_all()

    def count_students(self) -> int:
        return self._students.count()
