"""앱 대시보드 라우터 — 관찰 통계 요약 API.

App Dashboard Router — Summary statistics for the dashboard charts.
Returns chart data only; rendering is the client's concern.
"""

from datetime import date
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from observations.api.deps import get_current_user
from observations.database import get_db
from observations.models.user import User
from observations.services.aggregation_service import ObservationFilter
from observations.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/summary")
async def get_summary(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    areas: Annotated[list[str], Query()] = [],
    categories: Annotated[list[str], Query()] = [],
    status: Annotated[str, Query()] = "all",
    interval: Annotated[str, Query()] = "month",
    top: Annotated[int, Query(ge=1, le=50)] = 5,
) -> dict:
    """대시보드 요약 — 기간/구역/위험도/상태 필터."""
    criteria = ObservationFilter(
        date_from=date_from,
        date_to=date_to,
        areas=tuple(areas),
        categories=tuple(categories),
        status=status,
    )
    return await dashboard_service.get_summary(db, criteria, interval=interval, top=top)
