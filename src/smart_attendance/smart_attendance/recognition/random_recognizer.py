from __future__ import annotations

import random
from typing import Any, Optional

from ..core.constants import DEFAULT_MATCH_PROBABILITY
from ..core.exceptions import ValidationError
from ..roster.repository import StudentRepository
from .base import FaceRecognizer, RecognitionResult


class RandomRosterRecognizer(FaceRecognizer):
    """Development stand-in for a real recognizer.

    Ignores the image content and picks a random roster student some of the time.
    """

    def __init__(
        self,
        students: StudentRepository,
        *,
        match_probability: float = DEFAULT_MATCH_PROBABILITY,
        rng: Optional[random.Random] = None,
    ):
        self._students = students
        self._match_probability = float(match_probability)
        self._rng = rng or random.Random()

    def recognize(self, image: Any) -> RecognitionResult:
        if image is None or (isinstance(image, (str, bytes)) and not image.strip()):
            raise ValidationError("Image is required")

        roster = list(self._students.list_all())
        if roster and self._rng.random() < self._match_probability:
            student = self._rng.choice(roster)
            return RecognitionResult(
                matched=True,
                student_id=student.student_id,
                name=student.name,
                confidence=round(0.6 + self._rng.random() * 0.35, 2),
            )
        return RecognitionResult(matched=False, confidence=round(0.2 + self._rng.random() * 0.35, 2))
