from __future__ import annotations

from typing import Optional, Protocol, Sequence

from .model import Student


class StudentRepository(Protocol):
    """Roster storage.

    ``fields`` passed to create/update are already validated and normalized
    (keys: student_id, name, faculty, department, year, semester). Implementations
    raise DuplicateStudentId when ``student_id`` would collide with another row.
    """

    def get_by_id(self, id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_student_id(self, student_id: str) -> Optional[Student]:
        raise NotImplementedError

    def create(self, fields: dict) -> Student:
        raise NotImplementedError

    def update(self, id: int, fields: dict) -> Optional[Student]:
        raise NotImplementedError

    def delete_by_id(self, id: int) -> bool:
        raise NotImplementedError

    def list_all(self) -> Sequence[Student]:
        """Newest first."""
        raise NotImplementedError

    def count(self) -> int:
        raise NotImplementedError
