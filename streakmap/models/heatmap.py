"""
Heatmap domain model.

A heatmap is a calendar grid: one column per week, one cell per day, each cell
shaded by an intensity level derived from its activity count.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional, Tuple

from streakmap.models.streak import WeekStart


@dataclass(frozen=True)
class HeatmapDay:
    date: Optional[date]  # None for padding past the ends of the calendar
    weekday: int  # 0 = first day of the configured week
    count: int
    level: int  # 0..levels
    in_range: bool = True  # False for cells padding the grid to whole weeks

    def to_dict(self) -> dict:
        return {
            "date": self.date.isoformat() if self.date else None,
            "weekday": self.weekday,
            "count": self.count,
            "level": self.level,
            "in_range": self.in_range,
        }


@dataclass(frozen=True)
class HeatmapWeek:
    week_start: date
    days: Tuple[HeatmapDay, ...]

    @property
    def total(self) -> int:
        return sum(day.count for day in self.days if day.in_range)

    def to_dict(self) -> dict:
        return {
            "week_start": self.week_start.isoformat(),
            "total": self.total,
            "days": [day.to_dict() for day in self.days],
        }


@dataclass(frozen=True)
class Heatmap:
    """Week-by-weekday contribution grid."""

    start: Optional[date] = None
    end: Optional[date] = None
    week_start: WeekStart = WeekStart.MONDAY
    levels: int = 4
    total: int = 0
    active_days: int = 0
    max_count: int = 0
    weeks: Tuple[HeatmapWeek, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict:
        """Serialize to dict for JSON response."""
        return {
            "start": self.start.isoformat() if self.start else None,
            "end": self.end.isoformat() if self.end else None,
            "week_start": self.week_start.value,
            "levels": self.levels,
            "total": self.total,
            "active_days": self.active_days,
            "max_count": self.max_count,
            "weeks": [week.to_dict() for week in self.weeks],
        }
