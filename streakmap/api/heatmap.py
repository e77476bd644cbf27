"""
Heatmap API Endpoints

POST /v1/heatmap — calendar grid with intensity levels, plus streaks for the same activity
"""

from typing import Dict, List, Optional

from fastapi import APIRouter
from pydantic import BaseModel, Field

from streakmap.api.streaks import enforce_input_cap
from streakmap.features.heatmap.service import build_heatmap, merge_counts
from streakmap.features.streaks.normalize import resolve_timezone
from streakmap.features.streaks.service import compute_streaks

router = APIRouter(prefix="/v1/heatmap", tags=["heatmap"])


class HeatmapRequest(BaseModel):
    counts: Optional[Dict[str, int]] = None
    dates: List[str] = Field(default_factory=list)
    start: Optional[str] = None
    end: Optional[str] = None
    week_start: Optional[str] = None
    levels: Optional[int] = None
    min_count: Optional[int] = None
    today: Optional[str] = None
    policy: Optional[str] = None
    timezone: Optional[str] = None


@router.post("")
def heatmap(body: HeatmapRequest) -> dict:
    """
    Build a contribution heatmap.

    Counts and bare dates are combined: each bare date adds one to its day.
    """
    enforce_input_cap(body.dates, body.counts)
    tz = resolve_timezone(body.timezone)
    totals = merge_counts(body.counts, body.dates, tz=tz)

    grid = build_heatmap(
        totals,
        start=body.start,
        end=body.end,
        week_start=body.week_start,
        levels=body.levels,
        tz=tz,
    )
    streaks = compute_streaks(
        counts=totals,
        min_count=body.min_count,
        week_start=grid.week_start,
        today=body.today,
        policy=body.policy,
        tz=tz,
    )
    return {"data": {"heatmap": grid.to_dict(), "streaks": streaks.to_dict()}}
