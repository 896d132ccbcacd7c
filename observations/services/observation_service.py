"""안전 관찰 서비스 — 라이프사이클 전이 오케스트레이션.

Observation service — Runs lifecycle transitions against the record store.
The lifecycle layer decides (and raises) before anything is written; this
layer performs the single insert / guarded update / delete and shapes API
responses. Close and edit are conditional updates matched on
``state == pending`` so a concurrent close makes the second writer see 404.
"""

import uuid
from datetime import date, datetime, timezone
from typing import Any, Sequence
from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from observations.models.observation import Observation
from observations.repositories.observation_repository import observation_repository
from observations.services import lifecycle_service, permission_service
from observations.services.lifecycle_service import LifecyclePolicy
from observations.services.permission_service import Actor
from observations.services.storage_service import storage_service
from observations.utils.dates import ensure_aware
from observations.utils.exceptions import NotFoundError
from observations.utils.labels import display_label, user_label
from observations.utils.urgency import classify

log = structlog.get_logger()

_NOT_FOUND = "Observation not found"


def _as_uuid(value: Any) -> UUID | None:
    if value is None or isinstance(value, UUID):
        return value
    return uuid.UUID(str(value))


def _iso(value: datetime | None) -> str | None:
    return ensure_aware(value).isoformat() if value is not None else None


class ObservationService:

    def build_response(
        self,
        obs: Observation,
        actor: Actor | None = None,
        policy: LifecyclePolicy | None = None,
        today: date | None = None,
    ) -> dict:
        """응답 dict — 신호등(pending만), 권한 플래그, 표시 라벨, 썸네일."""
        urgency = None
        if obs.state == lifecycle_service.STATE_PENDING:
            urgency = classify(obs.created_at, obs.due_date, today).as_dict()

        permissions = None
        if actor is not None:
            permissions = permission_service.permissions_for(
                actor, obs, policy or LifecyclePolicy.from_settings()
            )

        return {
            "id": str(obs.id),
            "state": obs.state,
            "area": obs.area,
            "area_label": display_label(obs.area),
            "equipment_or_location": obs.equipment_or_location,
            "severity": obs.severity,
            "due_date": obs.due_date,
            "description": obs.description,
            "evidence_url": obs.evidence_url,
            "evidence_thumbnail_url": storage_service.thumbnail_url(obs.evidence_url),
            "responsible_name": obs.responsible_name,
            "responsible_label": user_label(
                obs.responsible_name,
                obs.created_by,
                str(obs.created_by_id) if obs.created_by_id else None,
            ),
            "created_by": obs.created_by,
            "created_at": ensure_aware(obs.created_at),
            "closure_description": obs.closure_description,
            "closure_evidence_url": obs.closure_evidence_url,
            "closure_evidence_thumbnail_url": storage_service.thumbnail_url(obs.closure_evidence_url),
            "closed_by": obs.closed_by,
            "closed_at": ensure_aware(obs.closed_at) if obs.closed_at else None,
            "urgency": urgency,
            "permissions": permissions,
        }

    def mirror_snapshot(self, obs: Observation) -> dict[str, Any]:
        """보고용 미러에 넘길 평면 스냅샷 (모든 값은 문자열 또는 None)."""
        return {
            "id": str(obs.id),
            "state": obs.state,
            "responsible_name": obs.responsible_name,
            "area": obs.area,
            "equipment_or_location": obs.equipment_or_location,
            "severity": obs.severity,
            "due_date": obs.due_date,
            "description": obs.description,
            "created_by": obs.created_by,
            "created_at": _iso(obs.created_at),
            "closed_by": obs.closed_by,
            "closed_at": _iso(obs.closed_at),
            "closure_description": obs.closure_description,
        }

    # --- 조회 (Queries) ---

    async def list_observations(
        self,
        db: AsyncSession,
        state: str | None = None,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Observation], int]:
        return await observation_repository.get_page(db, state, page, per_page)

    async def list_all(self, db: AsyncSession, state: str | None = None) -> Sequence[Observation]:
        return await observation_repository.get_snapshot(db, state)

    async def list_history(self, db: AsyncSession) -> Sequence[Observation]:
        return await observation_repository.get_closed_history(db)

    async def get_detail(self, db: AsyncSession, observation_id: UUID) -> Observation:
        obs = await observation_repository.get_by_id(db, observation_id)
        if obs is None:
            raise NotFoundError(_NOT_FOUND)
        return obs

    # --- 전이 (Transitions) ---

    async def create(
        self,
        db: AsyncSession,
        actor: Actor,
        data: dict[str, Any],
        policy: LifecyclePolicy,
        now: datetime | None = None,
    ) -> Observation:
        record = lifecycle_service.build_create(
            actor, data, policy, now or datetime.now(timezone.utc), storage_service.is_own_url
        )
        record["created_by_id"] = _as_uuid(record["created_by_id"])
        obs = await observation_repository.create(db, record)
        log.info("observation_created", observation_id=str(obs.id), actor=actor.email, area=obs.area)
        return obs

    async def edit(
        self,
        db: AsyncSession,
        actor: Actor,
        observation_id: UUID,
        data: dict[str, Any],
        policy: LifecyclePolicy,
    ) -> tuple[Observation, bool]:
        """대기 중 관찰 수정 — (관찰, 변경 여부) 반환.

        Returns the observation and whether anything was written; an empty
        patch leaves the row untouched.
        """
        obs = await self.get_detail(db, observation_id)
        patch = lifecycle_service.build_edit(actor, obs, data, policy, storage_service.is_own_url)
        if not patch:
            return obs, False

        owner_email = None if actor.is_admin else actor.email
        updated = await observation_repository.update_pending(db, observation_id, patch, owner_email)
        if updated is None:
            raise NotFoundError(_NOT_FOUND)
        log.info("observation_edited", observation_id=str(updated.id), actor=actor.email, fields=sorted(patch))
        return updated, True

    async def close(
        self,
        db: AsyncSession,
        actor: Actor,
        observation_id: UUID,
        data: dict[str, Any],
        policy: LifecyclePolicy,
        now: datetime | None = None,
    ) -> Observation:
        obs = await self.get_detail(db, observation_id)
        patch = lifecycle_service.build_close(
            actor, obs, data, policy, now or datetime.now(timezone.utc), storage_service.is_own_url
        )
        patch["closed_by_id"] = _as_uuid(patch["closed_by_id"])

        owner_email = actor.email if policy.close_requires_ownership and not actor.is_admin else None
        updated = await observation_repository.update_pending(db, observation_id, patch, owner_email)
        if updated is None:
            raise NotFoundError(_NOT_FOUND)

        problems = lifecycle_service.check_invariants(updated)
        if problems:
            log.error("observation_invariant_violated", observation_id=str(updated.id), problems=problems)
        log.info("observation_closed", observation_id=str(updated.id), actor=actor.email)
        return updated

    async def delete(self, db: AsyncSession, actor: Actor, observation_id: UUID) -> None:
        obs = await self.get_detail(db, observation_id)
        lifecycle_service.check_delete(actor, obs)
        deleted = await observation_repository.delete(db, observation_id)
        if not deleted:
            raise NotFoundError(_NOT_FOUND)
        log.info("observation_deleted", observation_id=str(observation_id), actor=actor.email)


observation_service: ObservationService = ObservationService()
