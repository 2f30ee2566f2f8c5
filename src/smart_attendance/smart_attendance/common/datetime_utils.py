from __future__ import annotations

from datetime import date, datetime
from typing import Optional

from ..core.constants import DATE_FORMAT
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, DATE_FORMAT).date()


def normalize_day(value, field_name: str = "Date") -> str:
    """Return the canonical YYYY-MM-DD form of a calendar day.

    Accepts ``date``/``datetime`` objects or strings; anything that is not a real
    calendar day is a ValidationError.
    """

    if isinstance(value, datetime):
        return value.date().strftime(DATE_FORMAT)
    if isinstance(value, date):
        return value.strftime(DATE_FORMAT)
    if value is None or not str(value).strip():
        raise ValidationError(f"{field_name} is required")
    try:
        return parse_iso_date(str(value).strip()).strftime(DATE_FORMAT)
    except ValueError:
        raise ValidationError(f"{field_name} must be a valid YYYY-MM-DD date")


def parse_timestamp(value, field_name: str = "Timestamp") -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    else:
        text = str(value).strip()
        # JS clients send toISOString() values ending in "Z"
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError(f"{field_name} must be an ISO-8601 datetime")
    # Stored timestamps are naive local time (MySQL DATETIME has no zone).
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_str() -> str:
    return now_local().strftime(DATE_FORMAT)
