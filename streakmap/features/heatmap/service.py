"""
Heatmap builder.

Turns per-day activity counts into a calendar grid padded to whole weeks,
with each cell bucketed into an intensity level.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import date, tzinfo
from typing import Dict, Iterable, List, Optional, Union

from streakmap.core.config import settings
from streakmap.core.errors import InvalidInputError
from streakmap.core.logging import log_event
from streakmap.features.streaks.normalize import (
    DateLike,
    aggregate_counts,
    count_occurrences,
    resolve_timezone,
    to_activity_date,
)
from streakmap.features.streaks.service import (
    DAYS_PER_WEEK,
    FIRST_DAY_KEY,
    LAST_DAY_KEY,
    coerce_week_start,
    enforce_span,
    week_start_key,
)
from streakmap.models.heatmap import Heatmap, HeatmapDay, HeatmapWeek
from streakmap.models.streak import WeekStart


def intensity_level(count: int, max_count: int, levels: int) -> int:
    """Bucket count into 0..levels relative to max_count."""
    if count <= 0 or max_count <= 0:
        return 0
    level = math.ceil(count * levels / max_count)
    return max(1, min(levels, level))


def daily_counts(
    activity: Union[Mapping, Iterable[DateLike]],
    tz: Union[tzinfo, str, None] = None,
) -> Dict[date, int]:
    """Normalize a count mapping or a bare list of occurrences to per-day totals."""
    if isinstance(activity, Mapping):
        return aggregate_counts(activity, tz)
    return count_occurrences(activity, tz)


def merge_counts(*sources, tz: Union[tzinfo, str, None] = None) -> Dict[date, int]:
    """Sum several activity sources (mappings or bare lists) per normalized day."""
    reference = resolve_timezone(tz)
    merged: Dict[date, int] = {}
    for source in sources:
        if source is None:
            continue
        for day, count in daily_counts(source, reference).items():
            merged[day] = merged.get(day, 0) + count
    return merged


def build_heatmap(
    activity: Union[Mapping, Iterable[DateLike]],
    *,
    start: Optional[DateLike] = None,
    end: Optional[DateLike] = None,
    week_start: Union[WeekStart, str, None] = None,
    levels: Optional[int] = None,
    tz: Union[tzinfo, str, None] = None,
) -> Heatmap:
    reference = resolve_timezone(tz)
    start_of_week = coerce_week_start(week_start)
    level_count = settings.HEATMAP_LEVELS if levels is None else levels
    if isinstance(level_count, bool) or not isinstance(level_count, int) or level_count < 1:
        raise InvalidInputError(f"levels must be a positive integer (got {level_count!r})", value=level_count)

    totals = daily_counts(activity or {}, reference)
    active = sorted(day for day, count in totals.items() if count > 0)

    first = to_activity_date(start, reference) if start is not None else (active[0] if active else None)
    last = to_activity_date(end, reference) if end is not None else (active[-1] if active else None)
    if first is None or last is None:
        # Only one bound and no activity to infer the other from
        first = last = first or last
    elif first > last and (start is None or end is None):
        # An inferred bound never crosses an explicit one
        if start is None:
            first = last
        else:
            last = first
    if first is not None and first > last:
        raise InvalidInputError(f"start {first.isoformat()} is after end {last.isoformat()}")
    if first is None:
        return Heatmap(week_start=start_of_week, levels=level_count)
    enforce_span(first, last)

    in_range = {day: count for day, count in totals.items() if first <= day <= last}
    max_count = max(in_range.values(), default=0)

    first_key = first.toordinal()
    last_key = last.toordinal()

    weeks: List[HeatmapWeek] = []
    cursor = week_start_key(first, start_of_week)
    while cursor <= last_key:
        cells = []
        for offset in range(DAYS_PER_WEEK):
            key = cursor + offset
            # Padding past either end of the calendar has no date
            day = date.fromordinal(key) if FIRST_DAY_KEY <= key <= LAST_DAY_KEY else None
            inside = first_key <= key <= last_key
            count = in_range.get(day, 0) if inside else 0
            cells.append(
                HeatmapDay(
                    date=day,
                    weekday=offset,
                    count=count,
                    level=intensity_level(count, max_count, level_count),
                    in_range=inside,
                )
            )
        weeks.append(HeatmapWeek(week_start=date.fromordinal(max(cursor, FIRST_DAY_KEY)), days=tuple(cells)))
        cursor += DAYS_PER_WEEK

    heatmap = Heatmap(
        start=first,
        end=last,
        week_start=start_of_week,
        levels=level_count,
        total=sum(in_range.values()),
        active_days=sum(1 for count in in_range.values() if count > 0),
        max_count=max_count,
        weeks=tuple(weeks),
    )
    log_event(
        "debug",
        "heatmap.built",
        event_type="heatmap.built",
        extra={"weeks": len(heatmap.weeks), "total": heatmap.total, "max_count": max_count},
    )
    return heatmap
