"""안전 관찰 레포지토리.

Observation repository — Handles observations DB queries, including the
guarded UPDATE used by close and edit.
"""

from typing import Any, Sequence
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from observations.models.observation import Observation
from observations.repositories.base import BaseRepository


class ObservationRepository(BaseRepository[Observation]):

    def __init__(self) -> None:
        super().__init__(Observation)

    async def get_page(
        self,
        db: AsyncSession,
        state: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Observation], int]:
        query: Select = select(Observation).order_by(Observation.created_at.desc())
        if state:
            query = query.where(Observation.state == state)
        return await self.get_paginated(db, query, page, per_page)

    async def get_snapshot(
        self,
        db: AsyncSession,
        state: str | None = None,
    ) -> Sequence[Observation]:
        """대시보드용 전체 스냅샷 (최신순).

        Full snapshot for dashboards and public views, newest first.
        """
        query: Select = select(Observation).order_by(Observation.created_at.desc())
        if state:
            query = query.where(Observation.state == state)
        result = await db.execute(query)
        return result.scalars().all()

    async def get_closed_history(self, db: AsyncSession) -> Sequence[Observation]:
        query: Select = (
            select(Observation)
            .where(Observation.state == "closed")
            .order_by(Observation.closed_at.desc())
        )
        result = await db.execute(query)
        return result.scalars().all()

    async def update_pending(
        self,
        db: AsyncSession,
        observation_id: UUID,
        update_data: dict[str, Any],
        owner_email: str | None = None,
    ) -> Observation | None:
        """미결 상태일 때만 적용되는 조건부 업데이트.

        Conditional update matched by id AND ``state == pending``, plus the
        creator's email when ``owner_email`` is given. Returns None when the
        predicate excluded the row (already closed, not owned, or deleted).
        """
        match: list[ColumnElement[bool]] = [Observation.state == "pending"]
        if owner_email is not None:
            match.append(func.lower(func.trim(Observation.created_by)) == owner_email.strip().lower())
        return await self.update(db, observation_id, update_data, match=match)


observation_repository: ObservationRepository = ObservationRepository()
