"""마감 신호등(semáforo) 분류기.

Deadline traffic-light classifier.
Maps (created_at, due date, today) to verde / amarillo / rojo based on the
share of the window between creation and the due date that has elapsed.
"""

import enum
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import date
from typing import Any

from observations.utils.dates import day_difference, local_today, parse_due_date, to_local_date
from observations.utils.records import field_of

# 경과 비율 임계값 — 이 이상이면 "Por vencer"
URGENCY_THRESHOLD: float = 0.75


class UrgencyLevel(str, enum.Enum):
    VERDE = "verde"
    AMARILLO = "amarillo"
    ROJO = "rojo"


LABELS: dict[UrgencyLevel, str] = {
    UrgencyLevel.VERDE: "En tiempo",
    UrgencyLevel.AMARILLO: "Por vencer",
    UrgencyLevel.ROJO: "Vencido",
}


@dataclass(frozen=True)
class Urgency:
    level: UrgencyLevel
    label: str

    @classmethod
    def of(cls, level: UrgencyLevel) -> "Urgency":
        return cls(level=level, label=LABELS[level])

    def as_dict(self) -> dict[str, str]:
        return {"level": self.level.value, "label": self.label}


def classify(created_at: Any, due_date_text: Any, today: date | None = None) -> Urgency:
    """관찰 건의 긴급도를 분류합니다.

    Classify an observation's urgency relative to its due date.
    Unparseable input fails open to the cautionary state instead of raising.

    Args:
        created_at: 생성 시각 (Creation timestamp; datetime or ISO text)
        due_date_text: 마감일 (Due date text in any accepted format)
        today: 기준일 — None이면 현장 타임존의 오늘 (Reference day, default: local today)

    Returns:
        Urgency: 신호등 단계와 라벨 (Traffic-light level and label)
    """
    due = parse_due_date(due_date_text)
    created = to_local_date(created_at)
    if due is None or created is None:
        return Urgency.of(UrgencyLevel.AMARILLO)

    current = today or local_today()
    if current >= due:
        return Urgency.of(UrgencyLevel.ROJO)

    # 마감일 == 생성일이면 0 나눗셈 방지
    total = max(1, day_difference(created, due))
    elapsed = max(0, day_difference(created, current))
    if elapsed / total >= URGENCY_THRESHOLD:
        return Urgency.of(UrgencyLevel.AMARILLO)
    return Urgency.of(UrgencyLevel.VERDE)


def tally_urgency(observations: Iterable[Any], today: date | None = None) -> dict[str, int]:
    """미결(pending) 건의 신호등 단계별 건수."""
    counts = {level.value: 0 for level in UrgencyLevel}
    for obs in observations:
        if field_of(obs, "state") != "pending":
            continue
        urgency = classify(field_of(obs, "created_at"), field_of(obs, "due_date"), today)
        counts[urgency.level.value] += 1
    return counts
