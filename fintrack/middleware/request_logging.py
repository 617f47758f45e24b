"""요청 로깅 미들웨어 — structlog 출력 및 선택적 Axiom 전송.

Request logging middleware.
Every request is logged through structlog; when Axiom is configured the same
event is also ingested into the Axiom dataset. Credentials in request bodies
(password, token, secret ...) are masked, and the error ``detail``/``code``
of failed responses is attached.
"""

import json
import time
from typing import Any

import structlog
from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from fintrack.config import settings
from fintrack.utils.logging import is_sensitive_key

logger = structlog.get_logger(__name__)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def mask_sensitive(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if is_sensitive_key(k) else mask_sensitive(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [mask_sensitive(item, depth + 1) for item in data[:20]]
    return data


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 로깅하는 미들웨어.

    Logs method, path, status code, duration, masked body and error detail.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._axiom: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._axiom = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes: bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return mask_sensitive(json.loads(body_bytes))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if request.url.path in _SKIP_PATHS:
            return await call_next(request)

        start_time: float = time.perf_counter()
        request_body: Any = await self._read_body(request)

        event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request_body is not None:
            event["request_body"] = request_body

        try:
            response: Response = await call_next(request)
            event["status_code"] = response.status_code

            # 에러 응답시 body에서 사유 추출 — Extract error detail from error responses
            if response.status_code >= 400:
                resp_body: bytes = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                try:
                    error_data: Any = json.loads(resp_body)
                    if isinstance(error_data, dict):
                        event["error"] = str(error_data.get("detail", error_data))[:500]
                        if "code" in error_data:
                            event["error_code"] = error_data["code"]
                except (json.JSONDecodeError, UnicodeDecodeError):
                    event["error"] = resp_body.decode("utf-8", errors="replace")[:500]

                # 소비한 body를 다시 응답으로 반환 — Re-wrap consumed body
                response = Response(
                    content=resp_body,
                    status_code=response.status_code,
                    headers=dict(response.headers),
                    media_type=response.media_type,
                )
        except Exception as exc:
            event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            event["duration_ms"] = round((time.perf_counter() - start_time) * 1000, 2)
            self._emit(event)

        return response

    def _emit(self, event: dict[str, Any]) -> None:
        if event["status_code"] >= 500:
            logger.error("http_request", **event)
        elif event["status_code"] >= 400:
            logger.warning("http_request", **event)
        else:
            logger.info("http_request", **event)

        if self._axiom is None:
            return
        try:
            self._axiom.ingest_events(self._dataset, [event])
        except Exception as exc:  # noqa: BLE001 — 로깅 실패가 요청 처리에 영향주지 않도록
            logger.warning("axiom_ingest_failed", error=str(exc))
