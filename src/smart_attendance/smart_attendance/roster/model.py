from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass(frozen=True)
class Student:
    """Thực thể miền (domain): Student (một dòng trong roster)."""

    id: int
    student_id: str
    name: str
    faculty: str
    department: str
    year: int
    semester: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def full_info(self) -> str:
        return f"{self.student_id} - {self.name} ({self.faculty}, Year {self.year})"

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "studentId": self.student_id,
            "name": self.name,
            "faculty": self.faculty,
            "department": self.department,
            "year": self.year,
            "semester": self.semester,
            "fullInfo": self.full_info,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
            "updatedAt": self.updated_at.isoformat() if self.updated_at else None,
        }
