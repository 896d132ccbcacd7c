"""사용자(프로필) SQLAlchemy ORM 모델 정의.

User (profile) SQLAlchemy ORM model definition.
Each user has exactly one of two roles: "admin" or "user".

Tables:
    - users: 사용자 계정 및 프로필 (Accounts with display name and role)
"""

import uuid
from datetime import datetime, timezone
from sqlalchemy import String, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from observations.database import Base

ROLE_ADMIN: str = "admin"
ROLE_USER: str = "user"
ROLES: tuple[str, ...] = (ROLE_ADMIN, ROLE_USER)


class User(Base):
    """사용자 모델 — 인증 계정 + 프로필.

    User model — Authenticated identity and profile.
    Email is the login key; DNI-only users get a synthesized
    ``<dni>@<LOGIN_EMAIL_DOMAIN>`` email at creation time.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        dni: 국가 신분증 번호 (National id digits, optional)
        email: 로그인 이메일 (Login email, unique, lowercase)
        display_name: 표시 이름 (Display name, copied into observations as responsible)
        role: 역할 (Role: "admin" or "user")
        password_hash: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        is_active: 활성 상태 (Active status)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)

    Relationships:
        refresh_tokens: 리프레시 토큰 목록 (Active refresh tokens, cascade delete)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User unique identifier (UUID v4, auto-generated)
    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    # DNI — 숫자 로그인용 (optional, unique when present)
    dni: Mapped[str | None] = mapped_column(String(20), unique=True, nullable=True)
    # 로그인 이메일 — Login key (소문자 저장, stored lowercase)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 표시 이름 — Display name
    display_name: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    # 역할 — "admin" | "user"
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=ROLE_USER)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    # 활성 상태 — Whether the user account is active
    is_active: Mapped[bool] = mapped_column(Boolean, default=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — Relationships
    refresh_tokens = relationship("RefreshToken", back_populates="user", cascade="all, delete-orphan")

    @property
    def is_admin(self) -> bool:
        return self.role == ROLE_ADMIN
