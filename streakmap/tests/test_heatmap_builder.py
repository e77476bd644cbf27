"""
Heatmap Builder Tests

Verify:
1. Grid is padded to whole weeks aligned to the week start
2. Levels bucket counts relative to the busiest day
3. Bounds: inferred from activity, explicit start/end pad or clip
4. Calendar edges and span limits
"""

from datetime import date

import pytest

from streakmap.core.errors import InvalidInputError, PayloadTooLargeError
from streakmap.features.heatmap.service import build_heatmap, intensity_level, merge_counts


@pytest.fixture(autouse=True)
def _pinned_defaults(default_settings):
    yield


class TestIntensityLevel:
    def test_zero_count_is_level_zero(self):
        assert intensity_level(0, 5, 4) == 0

    def test_busiest_day_is_top_level(self):
        assert intensity_level(5, 5, 4) == 4

    def test_any_activity_is_at_least_level_one(self):
        assert intensity_level(1, 100, 4) == 1

    def test_midrange(self):
        assert intensity_level(2, 4, 4) == 2
        assert intensity_level(3, 4, 4) == 3


class TestHeatmapGrid:
    def test_single_week_grid(self):
        heatmap = build_heatmap({"2024-01-01": 1, "2024-01-02": 4, "2024-01-04": 2})

        assert heatmap.start == date(2024, 1, 1)
        assert heatmap.end == date(2024, 1, 4)
        assert len(heatmap.weeks) == 1
        week = heatmap.weeks[0]
        assert week.week_start == date(2024, 1, 1)
        assert [cell.count for cell in week.days] == [1, 4, 0, 2, 0, 0, 0]
        assert [cell.level for cell in week.days] == [1, 4, 0, 2, 0, 0, 0]
        assert [cell.in_range for cell in week.days] == [True, True, True, True, False, False, False]
        assert heatmap.total == 7
        assert heatmap.active_days == 3
        assert heatmap.max_count == 4

    def test_sunday_start_pads_leading_cell(self):
        heatmap = build_heatmap({"2024-01-01": 1, "2024-01-04": 1}, week_start="sunday")
        week = heatmap.weeks[0]
        assert week.week_start == date(2023, 12, 31)
        assert week.days[0].in_range is False
        assert week.days[1].date == date(2024, 1, 1)
        assert week.days[1].weekday == 1

    def test_bare_dates_count_occurrences(self):
        heatmap = build_heatmap(["2024-01-01", "2024-01-01", "2024-01-03"])
        cells = {cell.date: cell for cell in heatmap.weeks[0].days}
        assert cells[date(2024, 1, 1)].count == 2
        assert cells[date(2024, 1, 1)].level == 4
        assert cells[date(2024, 1, 3)].level == 2

    def test_explicit_bounds_pad_range(self):
        heatmap = build_heatmap({"2024-01-03": 1}, start="2024-01-01", end="2024-01-14")
        assert len(heatmap.weeks) == 2
        assert heatmap.total == 1
        assert all(cell.in_range for week in heatmap.weeks for cell in week.days)

    def test_explicit_bounds_clip_counts(self):
        heatmap = build_heatmap({"2024-01-01": 9, "2024-01-10": 2}, start="2024-01-08")
        assert heatmap.start == date(2024, 1, 8)
        assert heatmap.total == 2
        assert heatmap.max_count == 2

    def test_inferred_bound_never_crosses_explicit_one(self):
        heatmap = build_heatmap({"2024-01-10": 2}, end="2024-01-05")
        assert heatmap.start == heatmap.end == date(2024, 1, 5)
        assert heatmap.total == 0

    def test_start_after_end_rejected(self):
        with pytest.raises(InvalidInputError):
            build_heatmap({}, start="2024-02-01", end="2024-01-01")

    def test_empty_activity_gives_empty_grid(self):
        heatmap = build_heatmap({})
        assert heatmap.weeks == ()
        assert heatmap.total == 0
        assert heatmap.start is None

    def test_custom_levels(self):
        heatmap = build_heatmap({"2024-01-01": 1, "2024-01-02": 10}, levels=2)
        assert [cell.level for cell in heatmap.weeks[0].days[:2]] == [1, 2]

    @pytest.mark.parametrize("levels", [0, -1, True])
    def test_invalid_levels_rejected(self, levels):
        with pytest.raises(InvalidInputError):
            build_heatmap({"2024-01-01": 1}, levels=levels)

    def test_to_dict_shape(self):
        payload = build_heatmap({"2024-01-01": 2}).to_dict()
        assert payload["start"] == "2024-01-01"
        assert payload["week_start"] == "monday"
        assert payload["weeks"][0]["total"] == 2
        assert payload["weeks"][0]["days"][0] == {
            "date": "2024-01-01",
            "weekday": 0,
            "count": 2,
            "level": 4,
            "in_range": True,
        }


class TestCalendarEdges:
    def test_padding_past_last_representable_day(self):
        heatmap = build_heatmap({"9999-12-30": 1})
        cells = heatmap.weeks[0].days
        assert heatmap.weeks[0].week_start == date(9999, 12, 27)
        assert [cell.date for cell in cells[3:]] == [date(9999, 12, 30), date.max, None, None]
        assert cells[3].count == 1 and cells[3].in_range
        assert not cells[5].in_range and cells[5].level == 0
        assert heatmap.to_dict()["weeks"][0]["days"][6]["date"] is None

    def test_padding_before_first_representable_day(self):
        heatmap = build_heatmap(["0001-01-01"], week_start="sunday")
        cells = heatmap.weeks[0].days
        assert heatmap.weeks[0].week_start == date.min
        assert cells[0].date is None and not cells[0].in_range
        assert cells[1].date == date.min and cells[1].count == 1

    def test_span_over_limit_rejected(self):
        with pytest.raises(PayloadTooLargeError):
            build_heatmap(["0001-01-02", "9999-12-20"])

    def test_explicit_range_over_limit_rejected(self):
        with pytest.raises(PayloadTooLargeError):
            build_heatmap({}, start="2000-01-01", end="2030-01-01")

    def test_explicit_range_clips_span(self):
        heatmap = build_heatmap(["0001-01-02", "2024-01-03"], start="2024-01-01", end="2024-01-07")
        assert heatmap.total == 1
        assert len(heatmap.weeks) == 1


def test_merge_counts_combines_sources():
    merged = merge_counts({"2024-01-01": 2}, ["2024-01-01", "2024-01-02"], None)
    assert merged == {date(2024, 1, 1): 3, date(2024, 1, 2): 1}
