"""관리자 API 라우터 패키지 — 모든 관리자 엔드포인트 통합.

Admin API Router package — Aggregates admin-only endpoints into a single
router for inclusion in the FastAPI application.

Included routers:
    - users: 사용자 목록/생성/역할 변경 (User management)
    - observations: 관찰 Excel 내보내기 (Observation export)
"""

from fastapi import APIRouter

from observations.api.admin.observations import router as observations_router
from observations.api.admin.users import router as users_router

admin_router: APIRouter = APIRouter()

admin_router.include_router(users_router, prefix="/users", tags=["Admin Users"])
admin_router.include_router(observations_router, prefix="/observations", tags=["Admin Observations"])
