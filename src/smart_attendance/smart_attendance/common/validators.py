from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Callable, Mapping, Optional, Sequence

from ..core.exceptions import ValidationError

EMAIL_RE = re.compile(r"^\w+([.+-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,})+$")


def require_non_empty(value: str, field_name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    return str(value).strip()


def require_min_length(value: str, field_name: str, min_len: int) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be a string")
    if value is None or len(value) < min_len:
        raise ValidationError(f"{field_name} must be at least {min_len} characters")
    return value


def require_email(value: str, field_name: str = "Email") -> str:
    email = require_non_empty(value, field_name).lower()
    if not EMAIL_RE.match(email):
        raise ValidationError("Please provide a valid email address")
    return email


@dataclass(frozen=True)
class TextField:
    """Declarative rule for a required, trimmed text field."""

    key: str
    label: str
    min_len: int
    max_len: int
    transform: Optional[Callable[[str], str]] = None
    attr: Optional[str] = None

    def clean(self, raw: Any) -> str:
        value = require_non_empty(raw, self.label)
        if self.transform:
            value = self.transform(value)
        if len(value) < self.min_len:
            raise ValidationError(f"{self.label} must be at least {self.min_len} characters")
        if len(value) > self.max_len:
            raise ValidationError(f"{self.label} cannot exceed {self.max_len} characters")
        return value


@dataclass(frozen=True)
class IntField:
    """Declarative rule for a required integer within [minimum, maximum].

    Numeric strings are coerced since form clients send everything as text.
    """

    key: str
    label: str
    minimum: int
    maximum: int
    attr: Optional[str] = None

    def clean(self, raw: Any) -> int:
        if raw is None or (isinstance(raw, str) and not raw.strip()):
            raise ValidationError(f"{self.label} is required")
        if isinstance(raw, bool):
            raise ValidationError(f"{self.label} must be numeric")
        try:
            number = float(raw)
        except (TypeError, ValueError):
            raise ValidationError(f"{self.label} must be numeric")
        if not number.is_integer():
            raise ValidationError(f"{self.label} must be a whole number")
        value = int(number)
        if value < self.minimum:
            raise ValidationError(f"{self.label} must be at least {self.minimum}")
        if value > self.maximum:
            raise ValidationError(f"{self.label} cannot exceed {self.maximum}")
        return value


def validate_fields(rules: Sequence, data: Mapping[str, Any]) -> dict:
    """Run every rule against ``data`` and return the cleaned values.

    Validation happens as one step before any store mutation.
    """

    if data is None:
        raise ValidationError("Request body is required")
    cleaned = {}
    for rule in rules:
        target = rule.attr or rule.key
        raw = data.get(rule.key, data.get(target))
        cleaned[target] = rule.clean(raw)
    return cleaned


def optional_confidence(raw: Any) -> Optional[float]:
    if raw is None or raw == "":
        return None
    if isinstance(raw, bool):
        raise ValidationError("Confidence must be numeric")
    try:
        value = float(raw)
    except (TypeError, ValueError):
        raise ValidationError("Confidence must be numeric")
    if not 0.0 <= value <= 1.0:
        raise ValidationError("Confidence must be between 0 and 1")
    return value


def require_bool(raw: Any, field_name: str) -> bool:
    if isinstance(raw, bool):
        return raw
    if isinstance(raw, str) and raw.strip().lower() in {"true", "1", "yes", "on"}:
        return True
    if isinstance(raw, str) and raw.strip().lower() in {"false", "0", "no", "off"}:
        return False
    if isinstance(raw, int) and raw in (0, 1):
        return bool(raw)
    raise ValidationError(f"{field_name} must be true or false")
