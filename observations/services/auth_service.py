"""인증 서비스 — 로그인, 토큰 갱신, 로그아웃 비즈니스 로직.

Auth Service — Business logic for login, token refresh and sign-out.
The login field accepts a DNI or an email; a DNI is looked up in the
dni column first and then as the ``<dni>@<LOGIN_EMAIL_DOMAIN>`` email.
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
import structlog
from sqlalchemy.ext.asyncio import AsyncSession

from observations.config import settings
from observations.models.user import User
from observations.repositories.auth_repository import auth_repository
from observations.repositories.user_repository import user_repository
from observations.schemas.auth import LoginRequest, RefreshRequest, TokenResponse, UserMeResponse
from observations.utils.dates import ensure_aware
from observations.utils.exceptions import UnauthorizedError
from observations.utils.labels import is_dni, normalize_login
from observations.utils.security import create_access_token, create_refresh_token, decode_token, verify_password

log = structlog.get_logger()


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스."""

    def _build_jwt_payload(self, user: User) -> dict[str, str]:
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role,
        }

    async def _generate_tokens(self, db: AsyncSession, user: User) -> TokenResponse:
        """액세스/리프레시 토큰 쌍을 발급합니다.

        Issue an access/refresh token pair. Older refresh tokens of the user
        are removed first so they do not accumulate.
        """
        payload = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        await auth_repository.delete_user_refresh_tokens(db, user.id)
        expires_at: datetime = datetime.now(timezone.utc) + timedelta(
            days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS
        )
        await auth_repository.create_refresh_token(
            db, user_id=user.id, token=refresh_token, expires_at=expires_at
        )
        return TokenResponse(access_token=access_token, refresh_token=refresh_token)

    async def login(self, db: AsyncSession, data: LoginRequest) -> TokenResponse:
        """로그인을 처리합니다.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 로그인 요청 (DNI or email + password)

        Returns:
            TokenResponse: 토큰 응답 (Token response)

        Raises:
            UnauthorizedError: 잘못된 인증 정보 또는 비활성 계정
                               (Invalid credentials or deactivated account)
        """
        email = normalize_login(data.login)
        user: User | None = None
        if is_dni(data.login):
            # DNI 컬럼 우선, 없으면 DNI@도메인 이메일
            user = await user_repository.get_by_dni(db, data.login)
        if user is None and email:
            user = await user_repository.get_by_email(db, email)
        if user is None or not verify_password(data.password, user.password_hash):
            log.info("login_failed", login=email)
            raise UnauthorizedError("Invalid login or password")
        if not user.is_active:
            raise UnauthorizedError("Account is deactivated")

        log.info("login_succeeded", user_id=str(user.id))
        return await self._generate_tokens(db, user)

    async def refresh_tokens(self, db: AsyncSession, data: RefreshRequest) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Raises:
            UnauthorizedError: 유효하지 않거나 만료된 리프레시 토큰
                               (Invalid or expired refresh token)
        """
        db_token = await auth_repository.get_refresh_token(db, data.refresh_token)
        if db_token is None:
            raise UnauthorizedError("Invalid refresh token")
        # SQLite는 naive datetime을 돌려줌 — UTC로 간주
        if ensure_aware(db_token.expires_at) < datetime.now(timezone.utc):
            raise UnauthorizedError("Refresh token has expired")

        try:
            payload: dict = decode_token(data.refresh_token)
        except jwt.InvalidTokenError:
            raise UnauthorizedError("Invalid refresh token")
        if payload.get("type") != "refresh" or payload.get("sub") is None:
            raise UnauthorizedError("Invalid refresh token payload")

        user: User | None = await user_repository.get_by_id(db, UUID(payload["sub"]))
        if user is None or not user.is_active:
            raise UnauthorizedError("User not found or inactive")
        return await self._generate_tokens(db, user)

    async def logout(self, db: AsyncSession, user: User) -> None:
        """로그아웃 — 사용자의 모든 리프레시 토큰을 폐기합니다."""
        await auth_repository.delete_user_refresh_tokens(db, user.id)
        log.info("logout", user_id=str(user.id))

    def get_me(self, user: User) -> UserMeResponse:
        return UserMeResponse(
            id=str(user.id),
            dni=user.dni,
            email=user.email,
            display_name=user.display_name,
            role=user.role,
            is_active=user.is_active,
        )


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
