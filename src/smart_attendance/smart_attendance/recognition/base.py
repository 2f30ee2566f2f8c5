from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class RecognitionResult:
    matched: bool
    confidence: float
    student_id: Optional[str] = None
    name: Optional[str] = None


class FaceRecognizer(ABC):
    """Capability interface for the external face-recognition collaborator.

    ``image`` is whatever the capture client sent (data URL, base64 text, raw bytes).
    """

    @abstractmethod
    def recognize(self, image: Any) -> RecognitionResult:
        raise NotImplementedError
