"""사용자 관리 Pydantic 요청/응답 스키마 정의 (관리자 화면).

User management request/response schemas for the admin screen.
"""

from datetime import datetime

from pydantic import BaseModel, Field


class UserCreate(BaseModel):
    """사용자 생성 요청 스키마 (관리자용).

    User creation request schema (admin-only operation).
    Either ``dni`` or ``email`` must be given; with only a DNI the login
    email is synthesized as ``<dni>@<LOGIN_EMAIL_DOMAIN>``.

    Attributes:
        dni: DNI 6~12자리 숫자 (National id digits, optional)
        email: 이메일 (Login email, optional)
        display_name: 표시 이름 (Display name)
        password: 비밀번호 (Plain text, will be bcrypt-hashed)
        role: 역할 ("admin" or "user", default "user")
    """

    dni: str | None = Field(default=None, pattern=r"^\d{6,12}$")
    email: str | None = None
    display_name: str = Field(..., min_length=1)
    password: str = Field(..., min_length=6)
    role: str = "user"


class RoleUpdate(BaseModel):
    """역할 변경 요청 스키마."""

    role: str  # "admin" | "user"


class UserResponse(BaseModel):
    """사용자 응답 스키마."""

    id: str
    dni: str | None
    email: str
    display_name: str
    role: str
    is_active: bool
    created_at: datetime
