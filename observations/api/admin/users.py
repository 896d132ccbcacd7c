"""관리자 사용자 라우터 — 사용자 목록/생성/역할 변경.

Admin User Router — User listing, creation and role changes.
Permission: admin only.
"""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from observations.api.deps import require_admin
from observations.database import get_db
from observations.models.user import User
from observations.schemas.user import RoleUpdate, UserCreate, UserResponse
from observations.services.permission_service import Actor
from observations.services.user_service import user_service

router: APIRouter = APIRouter()


@router.get("", response_model=list[UserResponse])
async def list_users(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
    role: Annotated[str | None, Query(description="역할 필터 (admin|user)")] = None,
) -> list[UserResponse]:
    """사용자 목록을 조회합니다 (가입 순)."""
    return await user_service.list_users(db, Actor.from_user(current_user), role)


@router.post("", response_model=UserResponse, status_code=201)
async def create_user(
    data: UserCreate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """새 사용자를 생성합니다 (DNI + 이름 + 비밀번호 + 역할)."""
    result: UserResponse = await user_service.create_user(db, Actor.from_user(current_user), data)
    await db.commit()
    return result


@router.put("/{user_id}/role", response_model=UserResponse)
async def set_user_role(
    user_id: UUID,
    data: RoleUpdate,
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(require_admin)],
) -> UserResponse:
    """사용자 역할을 변경합니다."""
    result: UserResponse = await user_service.set_role(db, Actor.from_user(current_user), user_id, data.role)
    await db.commit()
    return result
