"""Date parsing and display formatting shared by the response schemas."""

from datetime import date, datetime
from typing import Optional, Union

from quickflex_admin.core.config import get_settings

DateLike = Union[date, datetime, str]

# Accepted textual inputs besides ISO 8601
_INPUT_FORMATS = ("%m-%d-%Y", "%m/%d/%Y")


def _parse_text(value: str) -> date:
    text = value.strip()
    try:
        # fromisoformat rejects a trailing Z before Python 3.11
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
        return parsed.date()
    except ValueError:
        pass

    for fmt in _INPUT_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue

    raise ValueError(f"Unrecognized date value: {value!r}")


def to_date(value: Optional[DateLike]) -> Optional[date]:
    """Coerce a date, datetime or date string to a calendar date."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        if not value.strip():
            return None
        return _parse_text(value)
    raise ValueError(f"Unsupported date value: {value!r}")


def format_display_date(value: Optional[DateLike], fmt: Optional[str] = None) -> Optional[str]:
    """Render a date-like value as MM-DD-YYYY.

    Args:
        value: date, datetime or date string (ISO 8601 or MM-DD-YYYY)
        fmt: strftime format override; defaults to the configured display format

    Returns:
        Formatted string, or None for a missing value
    """
    day = to_date(value)
    if day is None:
        return None
    # strftime pads %Y inconsistently for years below 1000 across platforms
    pattern = fmt or get_settings().display_date_format
    return day.strftime(pattern.replace("%Y", f"{day.year:04d}"))


def parse_input_date(value):
    """Pydantic before-validator accepting ISO dates, datetimes and MM-DD-YYYY."""
    if isinstance(value, datetime):
        return value.date()
    if value is None or isinstance(value, date):
        return value
    if isinstance(value, str):
        return to_date(value)
    return value


def serialize_display_date(value: Optional[DateLike]) -> Optional[str]:
    """Pydantic serializer rendering dates with the configured display format."""
    return format_display_date(value)
