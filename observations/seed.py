"""초기 데이터 시드 스크립트 — 테이블 생성 및 최초 관리자 계정.

Seed script — Creates the tables and the first admin account.
Run this script once to bootstrap the database.

Usage:
    python -m observations.seed

Creates:
    - 1개 관리자 계정: DNI 10000001 / admin123 (1 admin user, role "admin")
"""

import asyncio

from observations.config import settings
from observations.database import Base, async_session, engine
from observations.models import User
from observations.models.user import ROLE_ADMIN
from observations.repositories.user_repository import user_repository
from observations.utils.security import hash_password

ADMIN_DNI: str = "10000001"
ADMIN_PASSWORD: str = "admin123"
ADMIN_NAME: str = "Administrador"


async def seed() -> None:
    """데이터베이스를 초기 데이터로 시드합니다.

    Idempotent: 관리자 이메일이 이미 있으면 건너뜁니다 (Skips if the admin exists).
    """
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    email = f"{ADMIN_DNI}@{settings.LOGIN_EMAIL_DOMAIN}"
    async with async_session() as db:
        if await user_repository.get_by_email(db, email) is not None:
            print("Already seeded. Skipping.")
            return

        db.add(
            User(
                dni=ADMIN_DNI,
                email=email,
                display_name=ADMIN_NAME,
                role=ROLE_ADMIN,
                password_hash=hash_password(ADMIN_PASSWORD),
            )
        )
        await db.commit()

    print(f"Seed complete. Admin login: {ADMIN_DNI} / {ADMIN_PASSWORD}")


if __name__ == "__main__":
    asyncio.run(seed())
