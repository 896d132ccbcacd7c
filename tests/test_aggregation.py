"""대시보드 집계 함수 테스트 — 필터, 그룹, 상위 N, 기간 시계열."""

from datetime import date, datetime, timezone

import pytest

from observations.services.aggregation_service import (
    ObservationFilter,
    bucket_key,
    bucket_series,
    created_closed_series,
    filter_observations,
    group_count,
    ranked_labels,
    severity_tally,
    top_n,
)


def _at(year: int, month: int, day: int) -> datetime:
    # 정오 UTC — 리마 기준 같은 날
    return datetime(year, month, day, 12, 0, tzinfo=timezone.utc)


ITEMS = [
    {"area": "Chancado", "severity": "high", "state": "pending", "created_at": _at(2024, 1, 3), "closed_at": None},
    {"area": "CHANCADO ", "severity": "low", "state": "closed", "created_at": _at(2024, 1, 10), "closed_at": _at(2024, 2, 2)},
    {"area": "Molienda", "severity": "medium", "state": "pending", "created_at": _at(2024, 2, 5), "closed_at": None},
    {"area": "Flotación", "severity": "HIGH", "state": "closed", "created_at": _at(2024, 3, 1), "closed_at": _at(2024, 3, 2)},
    {"area": "Molienda", "severity": "low", "state": "pending", "created_at": "not a timestamp", "closed_at": None},
]


class TestFilter:

    def test_date_range_inclusive(self):
        result = filter_observations(ITEMS, ObservationFilter(date_from=date(2024, 1, 10), date_to=date(2024, 2, 5)))
        assert [obs["area"] for obs in result] == ["CHANCADO ", "Molienda"]

    def test_unparseable_created_at_excluded(self):
        assert len(filter_observations(ITEMS, ObservationFilter())) == 4

    def test_areas_match_normalized(self):
        result = filter_observations(ITEMS, ObservationFilter(areas=("chancado", "flotacion")))
        assert len(result) == 3

    def test_categories_case_insensitive(self):
        result = filter_observations(ITEMS, ObservationFilter(categories=("high",)))
        assert len(result) == 2

    def test_status(self):
        assert len(filter_observations(ITEMS, ObservationFilter(status="closed"))) == 2
        assert len(filter_observations(ITEMS, ObservationFilter(status="pending"))) == 2

    def test_idempotent(self):
        criteria = ObservationFilter(areas=("Molienda", "Chancado"), status="pending")
        once = filter_observations(ITEMS, criteria)
        assert filter_observations(once, criteria) == once


class TestGrouping:

    def test_group_count_skips_empty_keys(self):
        counts = group_count(["a", "", None, "b", "a"], lambda item: item)
        assert counts == {"a": 2, "b": 1}

    def test_top_n_with_remainder(self):
        ranked = top_n({"a": 3, "b": 1, "c": 2, "d": 1}, 2)
        assert ranked.items == [("a", 3), ("c", 2)]
        assert ranked.remainder == 2

    def test_top_n_ties_keep_first_seen_order(self):
        ranked = top_n({"x": 1, "y": 1, "z": 1}, 2)
        assert ranked.items == [("x", 1), ("y", 1)]
        assert ranked.remainder == 1

    def test_top_n_sum_preserved(self):
        counts = {"a": 5, "b": 4, "c": 3}
        ranked = top_n(counts, 10)
        assert sum(count for _, count in ranked.items) + ranked.remainder == sum(counts.values())
        assert ranked.remainder == 0

    def test_ranked_labels_group_spellings(self):
        result = ranked_labels(ITEMS, "area", 1)
        assert result["items"] == [{"key": "chancado", "label": "Chancado", "count": 2}]
        assert result["remainder"] == 3

    def test_severity_tally(self):
        assert severity_tally(ITEMS) == {"low": 2, "medium": 1, "high": 2}


class TestBuckets:

    def test_bucket_keys(self):
        wednesday = date(2024, 1, 10)
        assert bucket_key(wednesday, "day") == "2024-01-10"
        assert bucket_key(wednesday, "week") == "2024-01-08"
        assert bucket_key(wednesday, "month") == "2024-01"

    def test_unknown_interval(self):
        with pytest.raises(ValueError):
            bucket_key(date(2024, 1, 10), "year")

    def test_series_share_label_axis(self):
        result = created_closed_series(ITEMS, "month")
        assert result["labels"] == ["2024-01", "2024-02", "2024-03"]
        assert result["series"]["created"] == [2, 1, 1]
        assert result["series"]["closed"] == [0, 1, 1]

    def test_series_lengths_match_labels(self):
        result = bucket_series(ITEMS, "day", {"created": lambda obs: obs["created_at"]})
        assert len(result["series"]["created"]) == len(result["labels"])
        assert sum(result["series"]["created"]) == 4

    def test_empty_input(self):
        assert created_closed_series([], "week") == {"labels": [], "series": {"created": [], "closed": []}}
