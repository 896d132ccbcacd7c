"""API 요청 로깅 미들웨어 — structlog + Axiom.

API request logging middleware.
Every request is logged as an ``http_request`` structlog event; when Axiom
is configured the same event is also ingested into the Axiom dataset.
Sensitive fields (password, token, secret) are masked and multipart bodies
(evidence photos) are never read.
"""

import json
import re
import time
from typing import Any

import structlog
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from observations.config import settings

log = structlog.get_logger()

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies and params
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

_MAX_DETAIL = 500


def _mask(data: Any, depth: int = 0) -> Any:
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(str(k)) else _mask(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask(item, depth + 1) for item in data[:20]]
    if isinstance(data, str) and len(data) > 2000:
        return data[:2000] + "...(truncated)"
    return data


def _detail_of(body: bytes) -> str:
    """에러 응답 body에서 detail 추출 (dict detail은 JSON 문자열로)."""
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:_MAX_DETAIL]
    detail = data.get("detail", data) if isinstance(data, dict) else data
    text = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
    return text[:_MAX_DETAIL]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """요청/응답 로깅 미들웨어.

    Logs method, path, params, masked JSON body, status code, duration and
    the error detail of 4xx/5xx responses.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        content_type = request.headers.get("content-type", "")
        if request.method not in ("POST", "PUT", "PATCH") or "multipart/" in content_type:
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _mask(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        path = request.url.path
        if path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES):
            return await call_next(request)

        start_time = time.time()
        request_body = await self._read_body(request)

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _detail_of(resp_body)

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            error_detail = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event: dict[str, Any] = {
                "method": request.method,
                "path": path,
                "status_code": status_code,
                "duration_ms": round((time.time() - start_time) * 1000, 2),
            }
            if request.query_params:
                event["query_params"] = _mask(dict(request.query_params))
            if request_body is not None:
                event["request_body"] = request_body
            if error_detail:
                event["error"] = error_detail

            log.info("http_request", **event)
            if self._client is not None:
                try:
                    self._client.ingest_events(self._dataset, [event])
                except Exception as exc:  # 로깅 실패가 요청 처리에 영향주지 않도록
                    log.warning("axiom_ingest_failed", error=str(exc))

        return response
