from __future__ import annotations

import time
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.shared.logging import bind_request_context, get_logger

log = get_logger("http")


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Structured access logs.
    - Logs method, path, status and latency once per request.
    - request_id is already bound by RequestIdMiddleware; tenant_id is bound
      by the tenant dependency once the header has been validated.
    """
    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        start = time.perf_counter()
        bind_request_context(
            path=request.url.path,
            method=request.method,
            client_ip=request.client.host if request.client else None,
        )
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            return response
        finally:
            dur_ms = round((time.perf_counter() - start) * 1000.0, 2)
            log.info(
                "http_access",
                method=request.method,
                path=request.url.path,
                status_code=status_code,
                duration_ms=dur_ms,
            )
