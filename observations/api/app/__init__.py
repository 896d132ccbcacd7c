"""앱 API 라우터 패키지 — 인증된 사용자용 엔드포인트 통합.

App API Router package — Aggregates every authenticated endpoint into a
single router for inclusion in the FastAPI application.

Included routers:
    - auth: 로그인/토큰 갱신/로그아웃/내 정보 (Login, refresh, sign-out, me)
    - observations: 안전 관찰 라이프사이클 (Observation lifecycle)
    - dashboard: 대시보드 요약 (Dashboard summary)
    - storage: 증빙 업로드 (Evidence upload)
"""

from fastapi import APIRouter

from observations.api.app.auth import router as auth_router
from observations.api.app.dashboard import router as dashboard_router
from observations.api.app.observations import router as observations_router
from observations.api.app.storage import router as storage_router

app_router: APIRouter = APIRouter()

app_router.include_router(auth_router, prefix="/auth", tags=["App Auth"])
app_router.include_router(observations_router, prefix="/observations", tags=["Observations"])
app_router.include_router(dashboard_router, prefix="/dashboard", tags=["Dashboard"])
app_router.include_router(storage_router, prefix="/storage", tags=["Storage"])
