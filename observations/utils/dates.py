"""날짜/마감일 유틸리티.

Date and deadline utilities.
Due dates arrive as text in several encodings (``YYYY-MM-DD``, ISO-8601,
``DD/MM/YYYY``); every day-granularity comparison is done on calendar dates
in the site time zone so a same-day deadline is never "in the future".
"""

import re
from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from observations.config import settings

# DD/MM/YYYY — 명시적 숫자 그룹 파싱 (Explicit digit-group parse)
_DMY_PATTERN = re.compile(r"^(\d{2})/(\d{2})/(\d{4})$")
# YYYY-MM-DD 단독 (Bare calendar date)
_ISO_DATE_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}$")
# ISO date-time — 날짜 뒤에 T 또는 공백 구분자 (Date followed by a time part)
_ISO_DATETIME_PATTERN = re.compile(r"^\d{4}-\d{2}-\d{2}[T ]\d{2}:\d{2}")


def site_timezone() -> ZoneInfo:
    """현장 타임존 — 잘못된 설정이면 UTC."""
    try:
        return ZoneInfo(settings.TIMEZONE)
    except (KeyError, ValueError):
        return ZoneInfo("UTC")


def ensure_aware(value: datetime) -> datetime:
    """naive datetime은 UTC로 간주합니다 (Naive values are treated as UTC)."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def local_today() -> date:
    return datetime.now(site_timezone()).date()


def parse_timestamp(value: object) -> datetime | None:
    """타임스탬프 파싱 — datetime, date, ISO-8601 텍스트를 허용.

    Returns an aware datetime, or None when the value cannot be parsed.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return ensure_aware(value)
    if isinstance(value, date):
        return datetime(value.year, value.month, value.day, tzinfo=site_timezone())
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    # "Z" 접미사 — fromisoformat이 3.10에서 지원하지 않음
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(text)
    except ValueError:
        return None
    if _ISO_DATE_PATTERN.match(text):
        return parsed.replace(tzinfo=site_timezone())
    return ensure_aware(parsed)


def to_local_date(value: object) -> date | None:
    """현장 타임존 기준 달력 날짜로 절삭합니다."""
    if isinstance(value, date) and not isinstance(value, datetime):
        return value
    parsed = parse_timestamp(value)
    if parsed is None:
        return None
    return parsed.astimezone(site_timezone()).date()


def parse_due_date(text: object) -> date | None:
    """마감일 파싱 — YYYY-MM-DD, ISO-8601, DD/MM/YYYY.

    Parse a due-date string into a calendar date. Any other shape,
    including impossible calendar dates, yields None. Never raises.

    Args:
        text: 마감일 텍스트 (Due date text, or a date/datetime)

    Returns:
        date | None: 달력 날짜 또는 None (Calendar date, or None when unclassifiable)
    """
    if isinstance(text, (date, datetime)):
        return to_local_date(text)
    if not isinstance(text, str):
        return None

    value = text.strip()
    if not value:
        return None

    match = _DMY_PATTERN.match(value)
    if match:
        day, month, year = (int(g) for g in match.groups())
        try:
            return date(year, month, day)
        except ValueError:
            return None

    if _ISO_DATE_PATTERN.match(value):
        try:
            return date.fromisoformat(value)
        except ValueError:
            return None

    # ISO date-time — naive 값은 현장 로컬 시각으로 간주 (naive = site-local wall time)
    if not _ISO_DATETIME_PATTERN.match(value):
        return None
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(value)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        return parsed.date()
    return parsed.astimezone(site_timezone()).date()


def day_difference(a: object, b: object) -> int:
    """a에서 b까지의 달력 일수 (b - a), 로컬 자정 기준.

    Whole calendar days from ``a`` to ``b``. Time of day is ignored.

    Raises:
        ValueError: 둘 중 하나라도 날짜로 해석할 수 없을 때
    """
    start = to_local_date(a)
    end = to_local_date(b)
    if start is None or end is None:
        raise ValueError("day_difference requires two parseable dates")
    return (end - start).days
