"""FastAPI 의존성 주입 모듈 — 인증, 역할 검사, 행위자/정책 컨텍스트.

FastAPI dependency injection module — Authentication and role checks.
Routers receive the authenticated ``User``, the ``Actor`` built from it and
the ``LifecyclePolicy`` as explicit dependencies; services never read the
session or settings on their own.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. decode_token()이 JWT를 검증하고 페이로드를 반환
       (decode_token verifies JWT and returns payload)
    3. 페이로드의 "sub" 필드로 DB에서 사용자를 조회
       (User is fetched from DB using payload "sub" field)
    4. 사용자 활성 상태를 확인 (User active status is verified)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from observations.database import get_db
from observations.models.user import User
from observations.repositories.user_repository import user_repository
from observations.services.lifecycle_service import LifecyclePolicy
from observations.services.permission_service import Actor
from observations.utils.exceptions import AuthorizationError, UnauthorizedError
from observations.utils.security import decode_token

# HTTP Bearer 토큰 추출기 — 헤더가 없으면 401 (auto_error=False로 직접 처리)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
) -> User:
    """JWT 토큰에서 현재 인증된 사용자를 추출합니다.

    Decode the bearer JWT and return the authenticated, active user.

    Raises:
        UnauthorizedError(401): 토큰 없음/무효/만료, 사용자 없음/비활성
                                (Missing, invalid or expired token; unknown or inactive user)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")
    try:
        payload: dict = decode_token(credentials.credentials)
        # 토큰 타입 검증 — Reject refresh tokens used as access tokens
        if payload.get("type") != "access":
            raise UnauthorizedError("Invalid token type")
        user_id = UUID(payload["sub"])
    except (jwt.InvalidTokenError, KeyError, ValueError):
        raise UnauthorizedError("Invalid or expired token")

    user: User | None = await user_repository.get_by_id(db, user_id)
    if user is None or not user.is_active:
        raise UnauthorizedError("User not found or inactive")
    return user


async def require_admin(
    current_user: Annotated[User, Depends(get_current_user)],
) -> User:
    """관리자 전용 라우트 가드 — 403 "Not authorized"."""
    if not current_user.is_admin:
        raise AuthorizationError()
    return current_user


async def get_actor(
    current_user: Annotated[User, Depends(get_current_user)],
) -> Actor:
    return Actor.from_user(current_user)


def get_policy() -> LifecyclePolicy:
    return LifecyclePolicy.from_settings()
