"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per request to Axiom: method, path, masked
body/query, status code, error detail and duration. Clock routes
(``/branches/{b}/employees/{e}/clock-in`` etc.) are tagged with the clock
action and the branch/employee ids so a shift's history can be followed.
Passes through untouched when Axiom is not configured.
"""

import json
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

# 마스킹 대상 필드 패턴 — Fields to mask in request/response bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|passwd|secret|token|authorization|api_key|apikey|credential|pin)",
    re.IGNORECASE,
)

# 출퇴근 동작 경로 — Staff clock action routes
_CLOCK_PATH = re.compile(
    r"/branches/(?P<branch_id>[^/]+)/employees/(?P<employee_id>[^/]+)/"
    r"(?P<action>clock-in|break-start|break-end|clock-out)$"
)

# 관리자 근무 기록 수정 경로 — Admin shift edit route
_SHIFT_EDIT_PATH = re.compile(r"/shifts/(?P<record_id>[^/]+)$")

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _truncate(value: Any, max_len: int = 2000) -> Any:
    if isinstance(value, str) and len(value) > max_len:
        return value[:max_len] + "...(truncated)"
    return value


def shift_tags(method: str, path: str) -> dict[str, str]:
    """경로에서 근무 관련 태그를 추출합니다.

    Returns ``{"clock_action", "branch_id", "employee_id"}`` for staff clock
    routes, ``{"shift_action": "admin_edit", "record_id"}`` for an admin PATCH
    of a shift record, else an empty dict.
    """
    match = _CLOCK_PATH.search(path)
    if match is not None and method == "POST":
        return {
            "clock_action": match.group("action"),
            "branch_id": match.group("branch_id"),
            "employee_id": match.group("employee_id"),
        }
    match = _SHIFT_EDIT_PATH.search(path)
    if match is not None and method == "PATCH":
        return {"shift_action": "admin_edit", "record_id": match.group("record_id")}
    return {}


def build_event(
    method: str,
    path: str,
    status_code: int,
    duration_ms: float,
    query_params: dict | None = None,
    request_body: Any = None,
    error_detail: str | None = None,
) -> dict[str, Any]:
    """Axiom 로그 이벤트를 구성합니다 — Build one structured log event."""
    event: dict[str, Any] = {
        "method": method,
        "path": path,
        "status_code": status_code,
        "duration_ms": duration_ms,
    }
    event.update(shift_tags(method, path))
    if query_params:
        event["query_params"] = _mask_dict(query_params)
    if request_body is not None:
        event["request_body"] = request_body
    if error_detail:
        event["error"] = error_detail
    return event


def _error_detail(body: bytes) -> str:
    # 에러 응답 body에서 사유 추출 — Extract the detail message from an error body
    try:
        data = json.loads(body)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return body.decode("utf-8", errors="replace")[:500]
    detail = data.get("detail", data) if isinstance(data, dict) else data
    if not isinstance(detail, str):
        detail = json.dumps(detail, ensure_ascii=False, default=str)
    return detail[:500]


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어."""

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _read_body(self, request: Request) -> Any:
        if request.method not in ("POST", "PUT", "PATCH"):
            return None
        body_bytes = await request.body()
        if not body_bytes:
            return None
        try:
            return _truncate(_mask_dict(json.loads(body_bytes)))
        except (json.JSONDecodeError, UnicodeDecodeError):
            return "(non-json body)"

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        # 제외 경로 또는 Axiom 미설정시 패스스루 — Pass through
        if request.url.path in _SKIP_PATHS or self._client is None:
            return await call_next(request)

        start = time.perf_counter()
        request_body = await self._read_body(request)
        query_params = dict(request.query_params) if request.query_params else None

        error_detail: str | None = None
        status_code: int = 500
        try:
            response = await call_next(request)
            status_code = response.status_code

            if status_code >= 400:
                resp_body = b""
                async for chunk in response.body_iterator:
                    resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")
                error_detail = _error_detail(resp_body)

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
            event = build_event(
                request.method,
                request.url.path,
                status_code,
                round((time.perf_counter() - start) * 1000, 2),
                query_params=query_params,
                request_body=request_body,
                error_detail=error_detail,
            )
            try:
                self._client.ingest_events(self._dataset, [event])
            except Exception:
                pass  # 로깅 실패가 요청 처리에 영향주지 않도록 — Never break a request on log failure

        return response
