"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every model with the SQLAlchemy
metadata, which Alembic migrations and relationship resolution rely on.

Modules:
    user: 사용자 프로필 및 역할 (User profile and role)
    token: 리프레시 토큰 (Refresh tokens)
    observation: 안전 관찰 기록 (Safety observations)
"""

from observations.models.user import User
from observations.models.token import RefreshToken
from observations.models.observation import Observation

__all__ = [
    "User",
    "RefreshToken",
    "Observation",
]
