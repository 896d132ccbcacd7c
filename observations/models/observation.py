"""안전 관찰(Observación) SQLAlchemy ORM 모델 정의.

Safety observation SQLAlchemy ORM model definition.
An observation is a logged safety issue at the plant with a two-state
lifecycle: pending (pendiente) → closed (cerrada). Closure is atomic; the four
closure fields are written together in one conditional UPDATE.

Tables:
    - observations: 안전 관찰 기록 (Safety observation records)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, ForeignKey, Index, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from observations.database import Base


class Observation(Base):
    """안전 관찰 모델 — 작성부터 종료까지의 이력.

    Safety observation model.
    ``due_date`` is stored as canonical ``YYYY-MM-DD`` text; legacy rows may
    hold ISO-8601 or ``DD/MM/YYYY`` text, which every reader parses through
    ``observations.utils.dates.parse_due_date``.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        state: 상태 (Lifecycle state: "pending" or "closed")
        area: 구역 (Plant area, one of the configured areas)
        equipment_or_location: 설비/장소 (Equipment or location, free text)
        severity: 위험도 (Severity: "low", "medium", "high")
        due_date: 마감일 텍스트 (Due date text, YYYY-MM-DD)
        description: 관찰 내용 (Observation narrative, required)
        evidence_url: 개설 증빙 URL (Opening evidence URL, optional by policy)
        responsible_name: 책임자 표시 이름 (Creator's display name, copied once)
        created_by: 작성자 이메일 (Creator email)
        created_by_id: 작성자 ID (Creator user UUID)
        created_at: 작성 일시 UTC (Creation timestamp)
        closure_description: 종료 설명 (Closure narrative, null until closed)
        closure_evidence_url: 종료 증빙 URL (Closure evidence URL, null until closed)
        closed_by: 종료자 이메일 (Closer email, null until closed)
        closed_by_id: 종료자 ID (Closer user UUID, null until closed)
        closed_at: 종료 일시 UTC (Closure timestamp, null until closed)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "observations"
    __table_args__ = (
        Index("ix_observations_state_created_at", "state", "created_at"),
    )

    # 관찰 고유 식별자 — Observation unique identifier
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # 상태 — "pending" | "closed"
    state: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    # 분류 — Classification
    area: Mapped[str] = mapped_column(String(100), nullable=False)
    equipment_or_location: Mapped[str] = mapped_column(String(255), nullable=False)
    severity: Mapped[str] = mapped_column(String(20), nullable=False, default="medium")
    # 마감일 — canonical YYYY-MM-DD text
    due_date: Mapped[str] = mapped_column(String(32), nullable=False)
    # 내용 및 증빙 — Narrative and opening evidence
    description: Mapped[str] = mapped_column(Text, nullable=False)
    evidence_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    # 책임자 라벨 — 작성 시점 프로필 이름 복사 (copied at creation, never re-derived)
    responsible_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    # 작성 정보 — Authorship
    created_by: Mapped[str] = mapped_column(String(255), nullable=False)
    created_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 종료 정보 — 모두 null(pending) 또는 모두 설정(closed)
    closure_description: Mapped[str | None] = mapped_column(Text, nullable=True)
    closure_evidence_url: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    closed_by: Mapped[str | None] = mapped_column(String(255), nullable=True)
    closed_by_id: Mapped[uuid.UUID | None] = mapped_column(
        Uuid, ForeignKey("users.id", ondelete="SET NULL"), nullable=True
    )
    closed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
