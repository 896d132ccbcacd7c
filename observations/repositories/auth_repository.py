"""인증 레포지토리 — 리프레시 토큰 CRUD.

Auth Repository — Refresh token lifecycle queries used by login, refresh
and logout (sign-out).
"""

from datetime import datetime
from uuid import UUID

from sqlalchemy import Select, delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from observations.models.token import RefreshToken


class AuthRepository:
    """인증 관련 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling refresh token persistence.
    """

    async def create_refresh_token(
        self,
        db: AsyncSession,
        user_id: UUID,
        token: str,
        expires_at: datetime,
    ) -> RefreshToken:
        """새 리프레시 토큰을 저장합니다.

        Persist a newly issued refresh token.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 사용자 ID (Token owner user UUID)
            token: JWT 리프레시 토큰 문자열 (JWT refresh token string)
            expires_at: 토큰 만료 일시 (Token expiration timestamp)

        Returns:
            RefreshToken: 생성된 리프레시 토큰 레코드 (Created refresh token record)
        """
        db_token: RefreshToken = RefreshToken(
            user_id=user_id,
            token=token,
            expires_at=expires_at,
        )
        db.add(db_token)
        await db.flush()
        await db.refresh(db_token)
        return db_token

    async def get_refresh_token(
        self,
        db: AsyncSession,
        token: str,
    ) -> RefreshToken | None:
        query: Select = select(RefreshToken).where(RefreshToken.token == token)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def delete_user_refresh_tokens(
        self,
        db: AsyncSession,
        user_id: UUID,
    ) -> None:
        """특정 사용자의 모든 리프레시 토큰을 삭제합니다.

        Delete all refresh tokens for a user (sign out from all devices).
        """
        stmt = delete(RefreshToken).where(RefreshToken.user_id == user_id)
        await db.execute(stmt)
        await db.flush()


# 싱글턴 인스턴스 — Singleton instance
auth_repository: AuthRepository = AuthRepository()
