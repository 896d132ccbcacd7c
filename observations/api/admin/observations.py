"""관리자 관찰 라우터 — 관찰 목록 Excel 내보내기.

Admin Observation Router — Excel export of the filtered observations.
Permission: admin only.
"""

from datetime import date
from io import BytesIO
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy.ext.asyncio import AsyncSession

from observations.api.deps import require_admin
from observations.database import get_db
from observations.models.user import User
from observations.services.aggregation_service import ObservationFilter
from observations.services.dashboard_service import dashboard_service

router: APIRouter = APIRouter()


@router.get("/export")
async def export_observations(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    date_from: Annotated[date | None, Query()] = None,
    date_to: Annotated[date | None, Query()] = None,
    areas: Annotated[list[str], Query()] = [],
    categories: Annotated[list[str], Query()] = [],
    status: Annotated[str, Query()] = "all",
) -> StreamingResponse:
    """필터된 관찰 목록을 Excel 파일로 내보냅니다."""
    criteria = ObservationFilter(
        date_from=date_from,
        date_to=date_to,
        areas=tuple(areas),
        categories=tuple(categories),
        status=status,
    )
    excel_bytes: bytes = await dashboard_service.export_excel(db, criteria)
    return StreamingResponse(
        BytesIO(excel_bytes),
        media_type="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        headers={"Content-Disposition": "attachment; filename=observaciones.xlsx"},
    )
