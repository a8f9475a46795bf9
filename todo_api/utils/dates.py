"""Timestamp helpers shared by the models and the query engine."""
from datetime import date, datetime, time, timezone
from typing import Optional

from todo_api.errors import InvalidQueryError


def utcnow() -> datetime:
    """Current time as a timezone-aware UTC datetime, the form the store keeps."""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    """Aware UTC view of a stored timestamp; naive values are read as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_date_bound(value: Optional[str], end_of_day: bool = False) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime used as a query bound.

    A bare date (``2024-01-15``) means midnight, or the last instant of that
    day when ``end_of_day`` is set. Blank values mean no bound.

    Raises:
        InvalidQueryError: If the value is not ISO-8601
    """
    if value is None or not value.strip():
        return None

    text = value.strip()
    try:
        day = date.fromisoformat(text)
    except ValueError:
        day = None

    if day is not None:
        return datetime.combine(day, time.max if end_of_day else time.min)

    try:
        parsed = datetime.fromisoformat(text.replace("Z", "+00:00"))
    except ValueError:
        raise InvalidQueryError(f"Invalid date format: {value}. Use ISO format (YYYY-MM-DD)")
    return to_naive_utc(parsed)
