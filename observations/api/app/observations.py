"""앱 관찰 라우터 — 안전 관찰 목록/상세/작성/수정/종료/삭제.

App Observation Router — Authenticated observation endpoints.
Every transition commits first and only then schedules the reporting
mirror as a background task, so a spreadsheet failure can never undo it.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, BackgroundTasks, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from observations.api.deps import get_actor, get_policy
from observations.database import get_db
from observations.schemas.common import MessageResponse, PaginatedResponse
from observations.schemas.observation import (
    ObservationClose,
    ObservationCreate,
    ObservationResponse,
    ObservationUpdate,
)
from observations.services.lifecycle_service import LifecyclePolicy
from observations.services.observation_service import observation_service
from observations.services.permission_service import Actor
from observations.services.sheets_mirror_service import sheets_mirror_service

router: APIRouter = APIRouter()


@router.get("", response_model=PaginatedResponse)
async def list_observations(
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    policy: Annotated[LifecyclePolicy, Depends(get_policy)],
    state: Annotated[str | None, Query(pattern="^(pending|closed)$")] = None,
    page: Annotated[int, Query(ge=1)] = 1,
    per_page: Annotated[int, Query(ge=1, le=100)] = 20,
) -> dict:
    """관찰 목록 (최신순)."""
    observations, total = await observation_service.list_observations(db, state, page, per_page)
    items = [observation_service.build_response(o, actor, policy) for o in observations]
    return {"items": items, "total": total, "page": page, "per_page": per_page}


@router.get("/{observation_id}", response_model=ObservationResponse)
async def get_observation(
    observation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    policy: Annotated[LifecyclePolicy, Depends(get_policy)],
) -> dict:
    obs = await observation_service.get_detail(db, observation_id)
    return observation_service.build_response(obs, actor, policy)


@router.post("", response_model=ObservationResponse, status_code=201)
async def create_observation(
    data: ObservationCreate,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    policy: Annotated[LifecyclePolicy, Depends(get_policy)],
) -> dict:
    """관찰 작성 — pending 상태로 생성."""
    obs = await observation_service.create(db, actor, data.model_dump(exclude_unset=True), policy)
    await db.commit()
    background_tasks.add_task(sheets_mirror_service.notify, "create", observation_service.mirror_snapshot(obs))
    return observation_service.build_response(obs, actor, policy)


@router.put("/{observation_id}", response_model=ObservationResponse)
async def edit_observation(
    observation_id: UUID,
    data: ObservationUpdate,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    policy: Annotated[LifecyclePolicy, Depends(get_policy)],
) -> dict:
    """관찰 수정 — 작성자 또는 관리자, pending 상태만."""
    obs, changed = await observation_service.edit(
        db, actor, observation_id, data.model_dump(exclude_unset=True), policy
    )
    await db.commit()
    if changed:
        background_tasks.add_task(sheets_mirror_service.notify, "edit", observation_service.mirror_snapshot(obs))
    return observation_service.build_response(obs, actor, policy)


@router.post("/{observation_id}/close", response_model=ObservationResponse)
async def close_observation(
    observation_id: UUID,
    data: ObservationClose,
    background_tasks: BackgroundTasks,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
    policy: Annotated[LifecyclePolicy, Depends(get_policy)],
) -> dict:
    """관찰 종료 — 종료 설명과 종료 증빙 필수."""
    obs = await observation_service.close(
        db, actor, observation_id, data.model_dump(exclude_unset=True), policy
    )
    await db.commit()
    background_tasks.add_task(sheets_mirror_service.notify, "close", observation_service.mirror_snapshot(obs))
    return observation_service.build_response(obs, actor, policy)


@router.delete("/{observation_id}", response_model=MessageResponse)
async def delete_observation(
    observation_id: UUID,
    db: Annotated[AsyncSession, Depends(get_db)],
    actor: Annotated[Actor, Depends(get_actor)],
) -> dict:
    """관찰 삭제 — 관리자 전용, closed 상태만."""
    await observation_service.delete(db, actor, observation_id)
    await db.commit()
    return {"message": "Observation deleted"}
