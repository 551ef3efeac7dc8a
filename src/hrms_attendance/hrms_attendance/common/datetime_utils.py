from __future__ import annotations

from datetime import date, datetime, time

from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    try:
        return datetime.strptime(value, "%Y-%m-%d").date()
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")


def parse_timestamp(value) -> datetime:
    """Parse a request timestamp into a naive local datetime.

    Accepts datetime objects or ISO-8601 strings (a trailing ``Z`` is read as
    UTC). Offset-aware values are converted to local time so that
    minute-of-day comparisons and the work date use the office clock.
    """

    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        text = value.strip()
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            raise ValidationError("Invalid timestamp")
    else:
        raise ValidationError("Timestamp is required")

    if parsed.tzinfo is not None:
        parsed = parsed.astimezone().replace(tzinfo=None)
    return parsed


def parse_hhmm(value: str, field_name: str) -> time:
    try:
        return datetime.strptime(str(value or "").strip(), "%H:%M").time()
    except ValueError:
        raise ValidationError(f"{field_name} must be HH:MM")


def minute_of_day(moment: datetime) -> int:
    return moment.hour * 60 + moment.minute
