"""레코드 필드 접근 헬퍼 — ORM 객체와 dict를 동일하게 다룹니다.

Pure rules and aggregations accept either ORM instances or plain mappings
(e.g. rows loaded from an export), so field access goes through here.
"""

from typing import Any


def field_of(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, dict):
        return record.get(name, default)
    return getattr(record, name, default)
