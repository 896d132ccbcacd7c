"""대시보드 집계 엔진 — 메모리 내 관찰 목록에 대한 순수 함수.

Aggregation engine for dashboards.
Pure functions over an in-memory snapshot of observations (ORM objects or
plain mappings): filtering, grouped counts, top-N with remainder, and
time-bucketed created/closed series.
"""

from collections.abc import Callable, Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, timedelta
from typing import Any, Hashable

from observations.utils.dates import to_local_date
from observations.utils.labels import display_label, normalize_key
from observations.utils.records import field_of

INTERVALS: tuple[str, ...] = ("day", "week", "month")
STATUSES: tuple[str, ...] = ("all", "pending", "closed")
SEVERITIES: tuple[str, ...] = ("low", "medium", "high")


@dataclass(frozen=True)
class ObservationFilter:
    """대시보드 필터 조건 — 요청마다 명시적으로 전달.

    Attributes:
        date_from: 시작일 포함 (Inclusive start, local date)
        date_to: 종료일 포함, 하루 끝까지 (Inclusive end of day, local date)
        areas: 구역 목록 — 비어 있으면 전체 (Areas; empty = any)
        categories: 위험도 목록 — 비어 있으면 전체 (Severities; empty = any)
        status: "all" | "pending" | "closed"
    """

    date_from: date | None = None
    date_to: date | None = None
    areas: tuple[str, ...] = ()
    categories: tuple[str, ...] = ()
    status: str = "all"


@dataclass
class TopN:
    items: list[tuple[Hashable, int]] = field(default_factory=list)
    remainder: int = 0


def _matches(obs: Any, criteria: ObservationFilter, area_keys: set[str], categories: set[str]) -> bool:
    # created_at을 해석할 수 없으면 어떤 기간에도 속하지 않음
    created = to_local_date(field_of(obs, "created_at"))
    if created is None:
        return False
    if criteria.date_from is not None and created < criteria.date_from:
        return False
    if criteria.date_to is not None and created > criteria.date_to:
        return False
    if area_keys and normalize_key(field_of(obs, "area")) not in area_keys:
        return False
    if categories and (field_of(obs, "severity") or "").lower() not in categories:
        return False
    if criteria.status != "all" and field_of(obs, "state") != criteria.status:
        return False
    return True


def filter_observations(items: Iterable[Any], criteria: ObservationFilter) -> list[Any]:
    """조건을 모두 만족하는 관찰만 남깁니다 (멱등).

    Keep the records that satisfy every criterion. Idempotent: filtering an
    already-filtered list with the same criteria returns the same list.
    """
    area_keys = {normalize_key(a) for a in criteria.areas if normalize_key(a)}
    categories = {c.lower() for c in criteria.categories if c}
    return [obs for obs in items if _matches(obs, criteria, area_keys, categories)]


def group_count(items: Iterable[Any], key_fn: Callable[[Any], Hashable | None]) -> dict[Hashable, int]:
    """키별 건수 — 최초 등장 순서 유지, 빈 키는 제외."""
    counts: dict[Hashable, int] = {}
    for item in items:
        key = key_fn(item)
        if key is None or key == "":
            continue
        counts[key] = counts.get(key, 0) + 1
    return counts


def top_n(counts: Mapping[Hashable, int], n: int) -> TopN:
    """건수 내림차순 상위 n개 + 나머지 합계.

    Stable descending sort (ties keep first-seen order), at most ``n``
    entries; ``sum(items) + remainder == sum(counts)``.
    """
    ranked = sorted(counts.items(), key=lambda kv: kv[1], reverse=True)
    limit = max(0, n)
    top = ranked[:limit]
    remainder = sum(count for _, count in ranked[limit:])
    return TopN(items=top, remainder=remainder)


def ranked_labels(items: Iterable[Any], field_name: str, n: int) -> dict[str, Any]:
    """정규화 키로 묶고 표시 라벨로 보여주는 상위 n개.

    Group by ``normalize_key`` of a free-text field and present each group
    with the display label of its first-seen spelling.
    """
    first_seen: dict[str, str] = {}

    def key_fn(obs: Any) -> str:
        raw = field_of(obs, field_name) or ""
        key = normalize_key(raw)
        if key and key not in first_seen:
            first_seen[key] = raw
        return key

    ranked = top_n(group_count(items, key_fn), n)
    return {
        "items": [
            {"key": key, "label": display_label(first_seen[key]), "count": count}
            for key, count in ranked.items
        ],
        "remainder": ranked.remainder,
    }


def bucket_key(day: date, interval: str) -> str:
    """기간 키 — day: YYYY-MM-DD, week: 해당 주 월요일, month: YYYY-MM."""
    if interval == "day":
        return day.isoformat()
    if interval == "week":
        return (day - timedelta(days=day.weekday())).isoformat()
    if interval == "month":
        return f"{day.year:04d}-{day.month:02d}"
    raise ValueError(f"unknown interval {interval!r}")


def bucket_series(
    items: Sequence[Any],
    interval: str,
    selectors: Mapping[str, Callable[[Any], Any]],
) -> dict[str, Any]:
    """기간별 시계열 — 모든 시리즈가 같은 라벨 축을 공유.

    Build one count series per selector over a shared label axis. Labels are
    the sorted union of periods seen by any selector; every series is
    zero-filled so it has exactly one value per label.

    Args:
        items: 관찰 목록 (Observations)
        interval: "day" | "week" | "month"
        selectors: 시리즈 이름 → 타임스탬프 선택 함수 (Series name → timestamp getter)

    Returns:
        dict: {"labels": [...], "series": {name: [count, ...]}}
    """
    counted: dict[str, dict[str, int]] = {}
    periods: set[str] = set()
    for name, selector in selectors.items():
        buckets: dict[str, int] = {}
        for obs in items:
            day = to_local_date(selector(obs))
            if day is None:
                continue
            key = bucket_key(day, interval)
            buckets[key] = buckets.get(key, 0) + 1
        counted[name] = buckets
        periods.update(buckets)

    labels = sorted(periods)
    return {
        "labels": labels,
        "series": {name: [buckets.get(label, 0) for label in labels] for name, buckets in counted.items()},
    }


def created_closed_series(items: Sequence[Any], interval: str) -> dict[str, Any]:
    return bucket_series(
        items,
        interval,
        {
            "created": lambda obs: field_of(obs, "created_at"),
            "closed": lambda obs: field_of(obs, "closed_at"),
        },
    )


def severity_tally(items: Iterable[Any]) -> dict[str, int]:
    tally = {severity: 0 for severity in SEVERITIES}
    for obs in items:
        severity = (field_of(obs, "severity") or "").lower()
        if severity in tally:
            tally[severity] += 1
    return tally
