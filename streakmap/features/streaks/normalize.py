"""
Day normalization.

Every raw value (date, datetime or ISO string) collapses onto a calendar day in
one reference timezone. Anything that cannot be normalized raises
InvalidInputError; nothing is skipped.
"""

from __future__ import annotations

from datetime import date, datetime, timezone, tzinfo
from typing import Dict, Iterable, Mapping, Optional, Union
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from streakmap.core.config import settings
from streakmap.core.errors import InvalidInputError
from streakmap.models.streak import DateSet

DateLike = Union[date, datetime, str]


def resolve_timezone(tz: Union[tzinfo, str, None] = None) -> tzinfo:
    """Return the reference timezone, defaulting to settings.STREAK_TIMEZONE."""
    if isinstance(tz, tzinfo):
        return tz
    name = tz or settings.STREAK_TIMEZONE
    if name.upper() in ("UTC", "Z"):
        return timezone.utc
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise InvalidInputError(f"Unknown timezone: {name!r}", value=name) from exc


def _parse_string(raw: str) -> Union[date, datetime]:
    text = raw.strip()
    if not text:
        raise InvalidInputError("Empty date string", value=raw)
    try:
        if len(text) == 10:
            return date.fromisoformat(text)
        if text.endswith(("Z", "z")):
            text = text[:-1] + "+00:00"
        return datetime.fromisoformat(text)
    except ValueError as exc:
        raise InvalidInputError(f"Unparseable date: {raw!r}", value=raw) from exc


def to_activity_date(value: DateLike, tz: Optional[tzinfo] = None) -> date:
    """Normalize one raw value to a calendar day in the reference timezone.

    Aware datetimes are converted to the reference zone before truncation;
    naive datetimes are taken to already be in it.
    """
    reference = tz or resolve_timezone()
    if isinstance(value, str):
        value = _parse_string(value)

    if isinstance(value, datetime):
        if value.tzinfo is not None and value.utcoffset() is not None:
            try:
                return value.astimezone(reference).date()
            except (OverflowError, ValueError) as exc:
                raise InvalidInputError(f"Date out of range after normalization: {value!r}", value=value) from exc
        return value.date()
    if isinstance(value, date):
        return value

    raise InvalidInputError(f"Not a date value: {value!r}", value=value)


def normalize_dates(values: Iterable[DateLike], tz: Union[tzinfo, str, None] = None) -> DateSet:
    """Normalize, deduplicate and sort raw values ascending."""
    if values is None:
        return DateSet()
    if isinstance(values, (str, bytes)):
        raise InvalidInputError("Expected a collection of dates, got a single string", value=values)
    reference = resolve_timezone(tz)
    days = {to_activity_date(value, reference) for value in values}
    return DateSet(days=tuple(sorted(days)))


def _validate_count(raw_key: object, count: object) -> int:
    if isinstance(count, bool) or not isinstance(count, int):
        raise InvalidInputError(f"Count for {raw_key!r} must be an integer (got {count!r})", value=count)
    if count < 0:
        raise InvalidInputError(f"Count for {raw_key!r} must not be negative (got {count})", value=count)
    return count


def aggregate_counts(counts: Mapping[DateLike, int], tz: Union[tzinfo, str, None] = None) -> Dict[date, int]:
    """Normalize count keys; counts landing on the same day are summed."""
    reference = resolve_timezone(tz)
    totals: Dict[date, int] = {}
    for raw_key, count in counts.items():
        day = to_activity_date(raw_key, reference)
        totals[day] = totals.get(day, 0) + _validate_count(raw_key, count)
    return totals


def count_occurrences(values: Iterable[DateLike], tz: Union[tzinfo, str, None] = None) -> Dict[date, int]:
    """Each raw occurrence contributes one to its normalized day."""
    if isinstance(values, (str, bytes)):
        raise InvalidInputError("Expected a collection of dates, got a single string", value=values)
    reference = resolve_timezone(tz)
    totals: Dict[date, int] = {}
    for value in values:
        day = to_activity_date(value, reference)
        totals[day] = totals.get(day, 0) + 1
    return totals
