from __future__ import annotations

from dataclasses import replace
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.exceptions import DuplicateStudentId
from ..database.memory_base import InMemoryStore
from .model import Student
from .repository import StudentRepository


class InMemoryStudentRepository(InMemoryStore, StudentRepository):
    def __init__(self, **kwargs):
        super().__init__(**kwargs)
        self._by_id: dict[int, Student] = {}

    def _find_student_id(self, student_id: str, *, exclude_id: Optional[int] = None) -> Optional[Student]:
        for s in self._by_id.values():
            if s.student_id == student_id and s.id != exclude_id:
                return s
        return None

    def get_by_id(self, id: int) -> Optional[Student]:
        with self.locked():
            return self._by_id.get(int(id))

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        with self.locked():
            return self._find_student_id(student_id)

    def create(self, fields: dict) -> Student:
        with self.locked():
            if self._find_student_id(fields["student_id"]):
                raise DuplicateStudentId()
            now = now_local()
            student = Student(
                id=self.next_id(),
                student_id=fields["student_id"],
                name=fields["name"],
                faculty=fields["faculty"],
                department=fields["department"],
                year=int(fields["year"]),
                semester=int(fields["semester"]),
                created_at=now,
                updated_at=now,
            )
            self._by_id[student.id] = student
            return student

    def update(self, id: int, fields: dict) -> Optional[Student]:
        with self.locked():
            current = self._by_id.get(int(id))
            if current is None:
                return None
            if self._find_student_id(fields["student_id"], exclude_id=current.id):
                raise DuplicateStudentId()
            updated = replace(
                current,
                student_id=fields["student_id"],
                name=fields["name"],
                faculty=fields["faculty"],
                department=fields["department"],
                year=int(fields["year"]),
                semester=int(fields["semester"]),
                updated_at=now_local(),
            )
            self._by_id[updated.id] = updated
            return updated

    def delete_by_id(self, id: int) -> bool:
        with self.locked():
            return self._by_id.pop(int(id), None) is not None

    def list_all(self) -> Sequence[Student]:
        with self.locked():
            items = list(self._by_id.values())
        items.sort(key=lambda s: (s.created_at, s.id), reverse=True)
        return items

    def count(self) -> int:
        with self.locked():
            return len(self._by_id)
