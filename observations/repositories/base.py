"""기본 CRUD 레포지토리 — 모든 레포지토리의 부모 클래스.

Base CRUD Repository — Parent class for all domain repositories.
Provides generic Create, Read, Update, Delete operations. ``update`` accepts
an optional match predicate so a write only lands when the row still
satisfies it (e.g. "still pending"); a ``None`` result then means the
predicate excluded the row.

Usage:
    class ObservationRepository(BaseRepository[Observation]):
        def __init__(self) -> None:
            super().__init__(Observation)
"""

from typing import Any, Generic, Sequence, TypeVar
from uuid import UUID

from sqlalchemy import ColumnElement, Select, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from observations.database import Base

# 제네릭 타입 변수 — SQLAlchemy 모델을 나타냄
# Generic type variable representing a SQLAlchemy model
ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType]):
    """제네릭 CRUD 레포지토리.

    Generic CRUD repository providing common database operations.

    Attributes:
        model: SQLAlchemy 모델 클래스 (The SQLAlchemy model class)
    """

    def __init__(self, model: type[ModelType]) -> None:
        self.model: type[ModelType] = model

    async def get_by_id(
        self,
        db: AsyncSession,
        record_id: UUID,
        refresh: bool = False,
    ) -> ModelType | None:
        """ID로 단일 레코드를 조회합니다.

        Retrieve a single record by its UUID.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 조회할 레코드의 UUID (UUID of the record to retrieve)
            refresh: True이면 세션에 캐시된 객체도 DB 값으로 덮어씀
                     (Overwrite an identity-mapped instance with the row's current values)

        Returns:
            ModelType | None: 조회된 레코드 또는 None (Found record or None)
        """
        query: Select = select(self.model).where(self.model.id == record_id)
        if refresh:
            query = query.execution_options(populate_existing=True)
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_paginated(
        self,
        db: AsyncSession,
        query: Select,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[ModelType], int]:
        """페이지네이션이 적용된 레코드 목록을 조회합니다.

        Retrieve a paginated list of records.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            query: 기본 SELECT 쿼리 (Base SELECT query)
            page: 현재 페이지 번호, 1부터 시작 (Current page number, 1-based)
            per_page: 페이지당 레코드 수 (Number of records per page)

        Returns:
            tuple[Sequence[ModelType], int]: (레코드 목록, 전체 개수)
                                             (List of records, total count)
        """
        count_query: Select = select(func.count()).select_from(query.subquery())
        total: int = (await db.execute(count_query)).scalar() or 0

        offset: int = (page - 1) * per_page
        result = await db.execute(query.offset(offset).limit(per_page))
        items: Sequence[ModelType] = result.scalars().all()

        return items, total

    async def create(
        self,
        db: AsyncSession,
        obj_data: dict[str, Any],
    ) -> ModelType:
        """새 레코드를 생성합니다.

        Create a new record in the database.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            obj_data: 생성할 레코드의 데이터 딕셔너리
                      (Dictionary of data for the new record)

        Returns:
            ModelType: 생성된 레코드 (The created record)
        """
        db_obj: ModelType = self.model(**obj_data)
        db.add(db_obj)
        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def update(
        self,
        db: AsyncSession,
        record_id: UUID,
        update_data: dict[str, Any],
        match: Sequence[ColumnElement[bool]] | None = None,
    ) -> ModelType | None:
        """기존 레코드를 업데이트합니다.

        Update an existing record by its UUID.

        Without ``match`` the record is loaded and patched attribute by
        attribute. With ``match`` a single ``UPDATE ... WHERE id = :id AND
        <match>`` is issued, so the write and the guard are one statement.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            record_id: 업데이트할 레코드의 UUID (UUID of the record to update)
            update_data: 업데이트할 필드와 값의 딕셔너리
                         (Dictionary of fields and values to update)
            match: 추가 WHERE 조건 (Extra WHERE conditions the row must satisfy)

        Returns:
            ModelType | None: 업데이트된 레코드, 없거나 조건 불일치 시 None
                              (Updated record, or None when missing or excluded by match)
        """
        if match:
            stmt = (
                update(self.model)
                .where(self.model.id == record_id, *match)
                .values(**update_data)
                .execution_options(synchronize_session=False)
            )
            result = await db.execute(stmt)
            if result.rowcount == 0:
                return None
            await db.flush()
            return await self.get_by_id(db, record_id, refresh=True)

        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return None

        # 전달된 필드만 업데이트 (None 값도 허용)
        # Update every field passed in (allows setting to None)
        for field, value in update_data.items():
            if hasattr(db_obj, field):
                setattr(db_obj, field, value)

        await db.flush()
        await db.refresh(db_obj)
        return db_obj

    async def delete(
        self,
        db: AsyncSession,
        record_id: UUID,
    ) -> bool:
        """레코드를 삭제합니다.

        Delete a record by its UUID.

        Returns:
            bool: 삭제 성공 여부 (Whether the deletion was successful)
        """
        db_obj: ModelType | None = await self.get_by_id(db, record_id)
        if db_obj is None:
            return False

        await db.delete(db_obj)
        await db.flush()
        return True

    async def exists(
        self,
        db: AsyncSession,
        filters: dict[str, Any],
    ) -> bool:
        """주어진 조건에 일치하는 레코드가 존재하는지 확인합니다.

        Check if a record matching the given filters exists.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            filters: 검색 조건 딕셔너리 (Filter criteria dictionary)

        Returns:
            bool: 레코드 존재 여부 (Whether a matching record exists)
        """
        query: Select = select(func.count()).select_from(self.model)
        for column_name, value in filters.items():
            if hasattr(self.model, column_name):
                query = query.where(getattr(self.model, column_name) == value)

        count: int = (await db.execute(query)).scalar() or 0
        return count > 0
