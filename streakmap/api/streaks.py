"""
Streak API Endpoints

POST /v1/streaks/compute — current/longest streaks and weekly activity for a list of dates
"""

from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from streakmap.core.config import settings
from streakmap.core.errors import PayloadTooLargeError
from streakmap.features.streaks.service import compute_streaks

router = APIRouter(prefix="/v1/streaks", tags=["streaks"])


class StreakRequest(BaseModel):
    dates: List[str] = Field(default_factory=list)
    counts: Optional[Dict[str, int]] = None
    week_start: Optional[str] = None
    min_count: Optional[int] = None
    today: Optional[str] = None
    policy: Optional[str] = None
    timezone: Optional[str] = None


def enforce_input_cap(*collections) -> None:
    size = sum(len(items) for items in collections if items)
    if size > settings.MAX_INPUT_DATES:
        raise PayloadTooLargeError(f"Too many dates: {size} > {settings.MAX_INPUT_DATES}")


@router.post("/compute")
def compute(body: StreakRequest) -> dict:
    """
    Compute streaks for a collection of dates.

    Body:
        {
            "dates": ["2025-12-20", "2025-12-21T23:30:00-05:00", ...],
            "counts": {"2025-12-19": 3},
            "week_start": "monday",
            "min_count": 1,
            "today": "2025-12-22",
            "policy": "latest",
            "timezone": "UTC"
        }

    Returns:
        {"data": {"current_streak": 3, "longest_streak": 5, ..., "weeks": [...]}}
    """
    enforce_input_cap(body.dates, body.counts)
    result = compute_streaks(
        body.dates,
        week_start=body.week_start,
        min_count=body.min_count,
        counts=body.counts,
        today=body.today,
        policy=body.policy,
        tz=body.timezone,
    )
    return {"data": result.to_dict()}
