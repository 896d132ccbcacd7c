"""앱 인증 라우터 — 로그인, 토큰 갱신, 로그아웃, 내 정보.

App Auth Router — Login (DNI or email), token refresh, sign-out and /me.
"""

from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from observations.api.deps import get_current_user
from observations.database import get_db
from observations.models.user import User
from observations.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from observations.schemas.common import MessageResponse
from observations.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post("/login", response_model=TokenResponse)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """DNI 또는 이메일 + 비밀번호로 로그인합니다."""
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """리프레시 토큰으로 새 토큰 쌍을 발급합니다."""
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.post("/logout", response_model=MessageResponse)
async def logout(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[User, Depends(get_current_user)],
) -> dict:
    """로그아웃 — 모든 리프레시 토큰 폐기."""
    await auth_service.logout(db, current_user)
    await db.commit()
    return {"message": "Signed out"}


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    current_user: Annotated[User, Depends(get_current_user)],
) -> UserMeResponse:
    return auth_service.get_me(current_user)
