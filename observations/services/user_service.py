"""사용자 서비스 — 관리자 화면의 사용자/역할 관리.

User Service — Business logic for the admin user screen: list users,
create users (DNI + name + password + role), change roles.
"""

from uuid import UUID

import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from observations.config import settings
from observations.models.user import ROLES, User
from observations.repositories.user_repository import user_repository
from observations.schemas.user import UserCreate, UserResponse
from observations.services.permission_service import Actor, can_manage_users
from observations.utils.exceptions import AuthorizationError, DuplicateError, NotFoundError, ValidationError
from observations.utils.security import hash_password

log = structlog.get_logger()


class UserService:
    """사용자 관련 비즈니스 로직을 처리하는 서비스."""

    def _to_response(self, user: User) -> UserResponse:
        return UserResponse(
            id=str(user.id),
            dni=user.dni,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            is_active=user.is_active,
            created_at=user.created_at,
        )

    def _check_actor(self, actor: Actor) -> None:
        if not can_manage_users(actor):
            raise AuthorizationError()

    def _check_role(self, role: str) -> str:
        if role not in ROLES:
            raise ValidationError("role", "role must be admin or user")
        return role

    async def list_users(
        self,
        db: AsyncSession,
        actor: Actor,
        role: str | None = None,
    ) -> list[UserResponse]:
        self._check_actor(actor)
        users = await user_repository.list_users(db, role=role)
        return [self._to_response(u) for u in users]

    async def create_user(self, db: AsyncSession, actor: Actor, data: UserCreate) -> UserResponse:
        """사용자를 생성합니다.

        Create a user. With only a DNI the login email is synthesized as
        ``<dni>@<LOGIN_EMAIL_DOMAIN>``.

        Raises:
            AuthorizationError: 관리자가 아님 (Actor is not an admin)
            ValidationError: DNI/이메일 둘 다 없음 또는 잘못된 역할
            DuplicateError: DNI 또는 이메일 중복 (Duplicate DNI or email)
        """
        self._check_actor(actor)
        role = self._check_role(data.role)

        email = (data.email or "").strip().lower()
        if not email and data.dni:
            email = f"{data.dni}@{settings.LOGIN_EMAIL_DOMAIN}"
        if not email:
            raise ValidationError("dni", "dni or email is required")

        if data.dni and await user_repository.exists(db, {"dni": data.dni}):
            raise DuplicateError("DNI already registered")
        if await user_repository.get_by_email(db, email) is not None:
            raise DuplicateError("Email already registered")

        user = await user_repository.create(
            db,
            {
                "dni": data.dni,
                "email": email,
                "display_name": data.display_name.strip(),
                "role": role,
                "password_hash": hash_password(data.password),
            },
        )
        log.info("user_created", user_id=str(user.id), role=role, actor=actor.email)
        return self._to_response(user)

    async def set_role(self, db: AsyncSession, actor: Actor, user_id: UUID, role: str) -> UserResponse:
        """역할을 변경합니다. 관리자는 자기 자신을 강등할 수 없습니다.

        Change a user's role. An admin cannot demote themselves, so the
        acting admin always remains.
        """
        self._check_actor(actor)
        role = self._check_role(role)

        user = await user_repository.get_by_id(db, user_id)
        if user is None:
            raise NotFoundError("User not found")
        if str(user.id) == actor.id and role != user.role:
            raise ValidationError("role", "admins cannot change their own role")

        updated = await user_repository.update(db, user_id, {"role": role})
        if updated is None:
            raise NotFoundError("User not found")
        log.info("user_role_changed", user_id=str(user_id), role=role, actor=actor.email)
        return self._to_response(updated)


# 싱글턴 인스턴스 — Singleton instance
user_service: UserService = UserService()
