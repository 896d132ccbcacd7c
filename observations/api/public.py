"""공개 라우터 — 로그인 없이 보는 관찰 현황과 이력.

Public Router — Read-only views that need no login: the public board
(pending with urgency, plus closed) and the closure history.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from observations.database import get_db
from observations.services.observation_service import observation_service

router: APIRouter = APIRouter()


@router.get("/observations")
async def public_observations(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> dict:
    """공개 현황 — pending(신호등 포함)과 closed, 건수."""
    snapshot = await observation_service.list_all(db)
    pending = [observation_service.build_response(o) for o in snapshot if o.state == "pending"]
    closed = [observation_service.build_response(o) for o in snapshot if o.state == "closed"]
    return {
        "pending": pending,
        "closed": closed,
        "counts": {"total": len(snapshot), "pending": len(pending), "closed": len(closed)},
    }


@router.get("/history")
async def public_history(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> list[dict]:
    """종료 이력 — 최근 종료 순."""
    return [observation_service.build_response(o) for o in await observation_service.list_history(db)]
