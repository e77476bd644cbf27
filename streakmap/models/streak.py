"""
Streak domain model.

Day-level only: every value here is a calendar date already normalized to the
reference timezone. Results are immutable and recomputed from raw input on
every call, so nothing in this module carries state between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Optional, Tuple


class WeekStart(str, Enum):
    """First day of a weekly grouping. Never affects streak contiguity."""

    MONDAY = "monday"
    SUNDAY = "sunday"

    @property
    def weekday(self) -> int:
        """Python weekday() number of the first day (Monday = 0)."""
        return 0 if self is WeekStart.MONDAY else 6


class CurrentStreakPolicy(str, Enum):
    """
    How the current streak treats recency.

    LATEST reports the most recent run no matter how long ago it ended.
    RECENT only reports a run that ends today or yesterday, otherwise 0.
    """

    LATEST = "latest"
    RECENT = "recent"


@dataclass(frozen=True)
class DateSet:
    """Deduplicated, ascending activity dates."""

    days: Tuple[date, ...] = ()

    def __len__(self) -> int:
        return len(self.days)

    def __iter__(self):
        return iter(self.days)

    def __contains__(self, day: object) -> bool:
        return day in self.days

    @property
    def keys(self) -> Tuple[int, ...]:
        """Canonical day keys (proleptic ordinals)."""
        return tuple(day.toordinal() for day in self.days)

    @property
    def first(self) -> Optional[date]:
        return self.days[0] if self.days else None

    @property
    def last(self) -> Optional[date]:
        return self.days[-1] if self.days else None


@dataclass(frozen=True)
class WeekActivity:
    """Seven activity flags for one week, ordered from the configured week start."""

    week_start: date
    days: Tuple[bool, ...]

    @property
    def active_days(self) -> int:
        return sum(1 for flag in self.days if flag)

    @property
    def active(self) -> bool:
        return any(self.days)

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat(),
            "days": list(self.days),
            "active_days": self.active_days,
            "active": self.active,
        }


@dataclass(frozen=True)
class StreakResult:
    """
    Outcome of one streak computation.

    Attributes:
        current_streak: consecutive active days in the current run (see CurrentStreakPolicy)
        longest_streak: longest contiguous run anywhere in the input
        last_active_date: most recent active day, None for empty input
        active_days: number of distinct active days
        is_active_today: whether the reference "today" is an active day
        current_week_streak: consecutive active weeks in the current run
        longest_week_streak: longest run of consecutive active weeks
        weeks: per-week activity flags aligned to week_start
    """

    current_streak: int = 0
    longest_streak: int = 0
    last_active_date: Optional[date] = None
    active_days: int = 0
    is_active_today: bool = False
    current_week_streak: int = 0
    longest_week_streak: int = 0
    week_start: WeekStart = WeekStart.MONDAY
    policy: CurrentStreakPolicy = CurrentStreakPolicy.LATEST
    weeks: Tuple[WeekActivity, ...] = field(default_factory=tuple)

    def validate(self) -> None:
        """Ensure result invariants hold."""
        assert self.current_streak >= 0, f"current_streak negative: {self.current_streak}"
        assert self.longest_streak >= self.current_streak, (
            f"longest_streak {self.longest_streak} < current_streak {self.current_streak}"
        )
        assert self.longest_week_streak >= self.current_week_streak, (
            f"longest_week_streak {self.longest_week_streak} < current_week_streak {self.current_week_streak}"
        )
        assert self.active_days >= self.longest_streak, "active_days must cover longest_streak"

    def to_dict(self) -> dict:
        """Serialize to dict for JSON response."""
        return {
            "current_streak": self.current_streak,
            "longest_streak": self.longest_streak,
            "last_active_date": self.last_active_date.isoformat() if self.last_active_date else None,
            "active_days": self.active_days,
            "is_active_today": self.is_active_today,
            "current_week_streak": self.current_week_streak,
            "longest_week_streak": self.longest_week_streak,
            "week_start": self.week_start.value,
            "policy": self.policy.value,
            "weeks": [week.to_dict() for week in self.weeks],
        }
