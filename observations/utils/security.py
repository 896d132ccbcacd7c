"""인증 보안 유틸리티 — bcrypt 비밀번호 + JWT 토큰.

Authentication security utilities.
Passwords are stored as bcrypt hashes; sessions are carried by short-lived
JWT access tokens plus persisted refresh tokens.

JWT Payload Structure:
    {
        "sub": "user_uuid",         # 사용자 ID (User identifier)
        "email": "dni@domain",      # 로그인 이메일 (Login email)
        "role": "admin"|"user",     # 역할 (Role)
        "jti": "uuid4 hex",         # 토큰 고유값 — 같은 초에 발급돼도 구별됨
        "exp": 1234567890,          # 만료 시간 UNIX timestamp (Expiration)
        "type": "access"|"refresh"  # 토큰 유형 (Token type discriminator)
    }
"""

import uuid
from datetime import datetime, timedelta, timezone
from typing import Any

import bcrypt
import jwt

from observations.config import settings


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다 (salted, ~60 chars)."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """비밀번호 검증 — 손상된 해시는 불일치로 처리합니다."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        return False


def _encode(data: dict[str, Any], token_type: str, expires_in: timedelta) -> str:
    to_encode: dict[str, Any] = data.copy()
    to_encode.update(
        {
            "exp": datetime.now(timezone.utc) + expires_in,
            "type": token_type,
            "jti": uuid.uuid4().hex,
        }
    )
    return jwt.encode(to_encode, settings.JWT_SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰 생성 — JWT_ACCESS_TOKEN_EXPIRE_MINUTES 후 만료.

    Example:
        token = create_access_token({"sub": str(user.id), "email": user.email, "role": user.role})
    """
    return _encode(data, "access", timedelta(minutes=settings.JWT_ACCESS_TOKEN_EXPIRE_MINUTES))


def create_refresh_token(data: dict[str, Any]) -> str:
    """JWT 리프레시 토큰 생성 — JWT_REFRESH_TOKEN_EXPIRE_DAYS 후 만료."""
    return _encode(data, "refresh", timedelta(days=settings.JWT_REFRESH_TOKEN_EXPIRE_DAYS))


def decode_token(token: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Raises:
        jwt.ExpiredSignatureError: 토큰 만료 시 (When token has expired)
        jwt.InvalidTokenError: 유효하지 않은 토큰 (When token is invalid)
    """
    return jwt.decode(token, settings.JWT_SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
