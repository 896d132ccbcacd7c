"""사용자 레포지토리 — 사용자 목록/조회 쿼리.

User Repository — Listing and lookup queries for user profiles.
Extends BaseRepository with User-specific database operations.
"""

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from observations.models.user import User
from observations.repositories.base import BaseRepository


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def list_users(
        self,
        db: AsyncSession,
        role: str | None = None,
        is_active: bool | None = None,
    ) -> list[User]:
        """사용자 목록을 필터 조건으로 조회합니다 (가입 순).

        Retrieve users with optional role / active filters, oldest first.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            role: 역할 필터 (Role filter, "admin" or "user")
            is_active: 활성 상태 필터 (Active status filter)

        Returns:
            list[User]: 사용자 목록 (List of users)
        """
        query: Select = select(User)
        if role is not None:
            query = query.where(User.role == role)
        if is_active is not None:
            query = query.where(User.is_active == is_active)
        query = query.order_by(User.created_at)
        result = await db.execute(query)
        return list(result.scalars().all())

    async def get_by_email(self, db: AsyncSession, email: str) -> User | None:
        """로그인 이메일로 사용자를 조회합니다 (대소문자 무시).

        Look up a user by login email, case-insensitively.
        """
        query: Select = select(User).where(func.lower(User.email) == email.strip().lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_by_dni(self, db: AsyncSession, dni: str) -> User | None:
        """DNI로 사용자를 조회합니다 (Look up a user by national id)."""
        query: Select = select(User).where(User.dni == dni.strip())
        result = await db.execute(query)
        return result.scalar_one_or_none()


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
