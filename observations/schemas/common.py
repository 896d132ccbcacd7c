"""공통 Pydantic 응답 스키마 정의.

Common Pydantic response schema definitions shared across API domains.
"""

from typing import Any

from pydantic import BaseModel


class PaginatedResponse(BaseModel):
    """페이지네이션 응답 스키마.

    Paginated response wrapper schema.

    Attributes:
        items: 항목 목록 (List of result items)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 (Current page number, 1-based)
        per_page: 페이지당 항목 수 (Items per page)
    """

    items: list[Any]  # 결과 항목 목록 (List of items for the current page)
    total: int  # 전체 항목 수 (Total item count)
    page: int  # 현재 페이지 — 1부터 시작 (Current page, 1-indexed)
    per_page: int  # 페이지당 항목 수 (Items per page)


class MessageResponse(BaseModel):
    """범용 메시지 응답 스키마 (삭제/로그아웃 확인용)."""

    message: str
