"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers login, token issuance/refresh, and current user info.
"""

from pydantic import BaseModel


class LoginRequest(BaseModel):
    """로그인 요청 스키마.

    Login request schema.
    ``login`` accepts either a 6-12 digit DNI or an email address; a DNI is
    expanded to ``<dni>@<LOGIN_EMAIL_DOMAIN>`` before lookup.

    Attributes:
        login: DNI 또는 이메일 (National id digits or email)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    login: str  # DNI 또는 이메일 (DNI or email)
    password: str  # 비밀번호 — 평문, 서버에서 bcrypt 해시와 비교 (Plain text, compared to bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Returned after successful login or token refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived refresh token)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str
    refresh_token: str
    token_type: str = "bearer"


class RefreshRequest(BaseModel):
    """토큰 갱신/로그아웃 요청 스키마."""

    refresh_token: str  # 기존 리프레시 토큰 (Current refresh token)


class UserMeResponse(BaseModel):
    """현재 사용자 정보 응답 스키마 (GET /auth/me).

    Attributes:
        id: 사용자 UUID (User unique identifier)
        dni: DNI (National id, nullable)
        email: 로그인 이메일 (Login email)
        display_name: 표시 이름 (Display name)
        role: 역할 ("admin" or "user")
        is_active: 활성 상태 (Account active status)
    """

    id: str
    dni: str | None
    email: str
    display_name: str
    role: str
    is_active: bool
