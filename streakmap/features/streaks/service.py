from __future__ import annotations

from datetime import date, datetime, tzinfo
from typing import Iterable, List, Mapping, Optional, Sequence, Set, Tuple, Union

from streakmap.core.config import settings
from streakmap.core.errors import InvalidInputError, PayloadTooLargeError
from streakmap.core.logging import log_event
from streakmap.features.streaks.normalize import (
    DateLike,
    aggregate_counts,
    normalize_dates,
    resolve_timezone,
    to_activity_date,
)
from streakmap.models.streak import (
    CurrentStreakPolicy,
    DateSet,
    StreakResult,
    WeekActivity,
    WeekStart,
)

DAYS_PER_WEEK = 7
FIRST_DAY_KEY = date.min.toordinal()
LAST_DAY_KEY = date.max.toordinal()


def coerce_week_start(value: Union[WeekStart, str, None]) -> WeekStart:
    if isinstance(value, WeekStart):
        return value
    raw = value if value is not None else settings.STREAK_WEEK_START
    try:
        return WeekStart(str(raw).lower())
    except ValueError as exc:
        raise InvalidInputError(f"Unknown week start: {raw!r}", value=raw) from exc


def coerce_policy(value: Union[CurrentStreakPolicy, str, None]) -> CurrentStreakPolicy:
    if isinstance(value, CurrentStreakPolicy):
        return value
    raw = value if value is not None else settings.STREAK_CURRENT_POLICY
    try:
        return CurrentStreakPolicy(str(raw).lower())
    except ValueError as exc:
        raise InvalidInputError(f"Unknown current streak policy: {raw!r}", value=raw) from exc


def coerce_min_count(value: Optional[int]) -> int:
    threshold = settings.STREAK_MIN_COUNT if value is None else value
    if isinstance(threshold, bool) or not isinstance(threshold, int) or threshold < 1:
        raise InvalidInputError(f"min_count must be a positive integer (got {threshold!r})", value=threshold)
    return threshold


def week_start_key(day: date, week_start: WeekStart) -> int:
    """Ordinal of the first day of the week containing day.

    May be FIRST_DAY_KEY - 1 or lower for the opening week of the calendar,
    which has no representable date.
    """
    offset = (day.weekday() - week_start.weekday) % DAYS_PER_WEEK
    return day.toordinal() - offset


def week_start_of(day: date, week_start: WeekStart) -> date:
    """First day of the week containing day, clamped to date.min."""
    return date.fromordinal(max(week_start_key(day, week_start), FIRST_DAY_KEY))


def enforce_span(first: date, last: date, max_span_days: Optional[int] = None) -> None:
    """Reject ranges whose day count would expand into an oversized grid."""
    limit = settings.MAX_SPAN_DAYS if max_span_days is None else max_span_days
    span = last.toordinal() - first.toordinal() + 1
    if span > limit:
        raise PayloadTooLargeError(
            f"Date range {first.isoformat()}..{last.isoformat()} spans {span} days (max {limit})"
        )


def longest_run(keys: Sequence[int], step: int = 1) -> int:
    """Longest run of keys spaced exactly step apart. keys must be sorted and unique."""
    longest = 0
    run = 0
    previous: Optional[int] = None
    for key in keys:
        run = run + 1 if previous is not None and key - previous == step else 1
        longest = max(longest, run)
        previous = key
    return longest


def trailing_run(keys: Sequence[int], step: int = 1) -> int:
    """Length of the run ending at the last key."""
    if not keys:
        return 0
    run = 1
    for index in range(len(keys) - 1, 0, -1):
        if keys[index] - keys[index - 1] != step:
            break
        run += 1
    return run


def current_run(
    keys: Sequence[int],
    policy: CurrentStreakPolicy,
    today_key: Optional[int],
    step: int = 1,
) -> int:
    """Current run length under policy.

    RECENT ignores keys after today and requires the run to end today or one
    step before it.
    """
    if not keys:
        return 0
    if policy is CurrentStreakPolicy.LATEST or today_key is None:
        return trailing_run(keys, step)

    eligible = [key for key in keys if key <= today_key]
    if not eligible or today_key - eligible[-1] > step:
        return 0
    return trailing_run(eligible, step)


def active_dates(
    dates: Iterable[DateLike] = (),
    *,
    counts: Optional[Mapping[DateLike, int]] = None,
    min_count: int = 1,
    tz: Union[tzinfo, str, None] = None,
) -> DateSet:
    """Resolve the set of active days.

    Bare dates are active by presence. Days named in counts are active only
    when their summed count reaches min_count; the mapping overrides presence
    for the days it names.
    """
    reference = resolve_timezone(tz)
    present = set(normalize_dates(dates or (), reference))
    if counts is None:
        return DateSet(days=tuple(sorted(present)))

    totals = aggregate_counts(counts, reference)
    active = {day for day in present if day not in totals}
    active.update(day for day, count in totals.items() if count >= min_count)
    return DateSet(days=tuple(sorted(active)))


def weekly_activity(
    day_set: DateSet,
    week_start: WeekStart,
    through: Optional[date] = None,
) -> Tuple[WeekActivity, ...]:
    """Per-week flags from the first active week to the week of the last day (or through)."""
    if not day_set:
        return ()
    # Ordinal keys so the opening and closing weeks of the calendar can hold
    # days that have no date; those never match and stay False.
    lookup: Set[int] = set(day_set.keys)
    last = day_set.last if through is None else max(day_set.last, through)
    cursor = week_start_key(day_set.first, week_start)
    final = week_start_key(last, week_start)

    weeks: List[WeekActivity] = []
    while cursor <= final:
        flags = tuple(cursor + i in lookup for i in range(DAYS_PER_WEEK))
        weeks.append(WeekActivity(week_start=date.fromordinal(max(cursor, FIRST_DAY_KEY)), days=flags))
        cursor += DAYS_PER_WEEK
    return tuple(weeks)


def compute_streaks(
    dates: Iterable[DateLike] = (),
    *,
    week_start: Union[WeekStart, str, None] = None,
    min_count: Optional[int] = None,
    counts: Optional[Mapping[DateLike, int]] = None,
    today: Optional[DateLike] = None,
    policy: Union[CurrentStreakPolicy, str, None] = None,
    tz: Union[tzinfo, str, None] = None,
) -> StreakResult:
    """
    Compute current and longest streaks plus weekly activity.

    Args:
        dates: raw activity dates; duplicates, any order, mixed offsets
        week_start: weekly grouping start (defaults to settings)
        min_count: activity threshold applied to days named in counts
        counts: optional per-day activity counts
        today: reference day for recency and is_active_today (defaults to now)
        policy: CurrentStreakPolicy (defaults to settings)
        tz: reference timezone (defaults to settings.STREAK_TIMEZONE)

    Returns:
        StreakResult

    Raises:
        InvalidInputError: a value cannot be parsed or normalized.
        PayloadTooLargeError: the active days (through an explicit today) span
            more than settings.MAX_SPAN_DAYS.
    """
    reference = resolve_timezone(tz)
    start_of_week = coerce_week_start(week_start)
    streak_policy = coerce_policy(policy)
    threshold = coerce_min_count(min_count)

    day_set = active_dates(dates, counts=counts, min_count=threshold, tz=reference)
    explicit_today = to_activity_date(today, reference) if today is not None else None
    reference_today = explicit_today or datetime.now(reference).date()

    keys = day_set.keys
    if day_set:
        enforce_span(day_set.first, max(day_set.last, explicit_today or day_set.last))
    week_keys = sorted({week_start_key(day, start_of_week) for day in day_set})
    today_week_key = week_start_key(reference_today, start_of_week)

    result = StreakResult(
        current_streak=current_run(keys, streak_policy, reference_today.toordinal()),
        longest_streak=longest_run(keys),
        last_active_date=day_set.last,
        active_days=len(day_set),
        is_active_today=reference_today in day_set,
        current_week_streak=current_run(week_keys, streak_policy, today_week_key, step=DAYS_PER_WEEK),
        longest_week_streak=longest_run(week_keys, step=DAYS_PER_WEEK),
        week_start=start_of_week,
        policy=streak_policy,
        weeks=weekly_activity(day_set, start_of_week, through=explicit_today),
    )
    result.validate()

    log_event(
        "debug",
        "streaks.computed",
        event_type="streaks.computed",
        extra={
            "active_days": result.active_days,
            "current_streak": result.current_streak,
            "longest_streak": result.longest_streak,
            "policy": streak_policy.value,
        },
    )
    return result
