"""FastAPI 애플리케이션 엔트리포인트 — 미들웨어 및 라우터 등록.

FastAPI application entry point — Logging, middleware and router registration.
"""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from observations.config import settings
from observations.middleware.axiom_logging import AxiomLoggingMiddleware
from observations.services.storage_service import storage_service, uploads_dir
from observations.utils.logging import configure_logging

configure_logging()

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# 요청 로깅 미들웨어 — CORS보다 먼저 등록하여 모든 요청을 캡처
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 로컬 모드 증빙 파일 제공 — Serve local evidence files at /uploads
if storage_service.is_local:
    app.mount("/uploads", StaticFiles(directory=uploads_dir(), check_dir=False), name="uploads")


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
# app_router: 인증된 사용자 (auth, observations, dashboard, storage)
# admin_router: 관리자 전용 (users, observations export)
# public_router: 로그인 불필요 (public board, history)
from observations.api.admin import admin_router  # noqa: E402
from observations.api.app import app_router  # noqa: E402
from observations.api.public import router as public_router  # noqa: E402

app.include_router(admin_router, prefix="/api/v1/admin")
app.include_router(app_router, prefix="/api/v1/app")
app.include_router(public_router, prefix="/api/v1/public", tags=["Public"])
