# src/shared/http/middleware/request_id_middleware.py
from __future__ import annotations

import re
import uuid

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from src.shared.logging import bind_request_context, clear_request_context

REQUEST_ID_HEADER = "X-Request-ID"
# client ids are echoed into headers and logs; keep them short and plain
_ACCEPTED_ID = re.compile(r"^[A-Za-z0-9._:-]{1,128}$")


def _incoming_request_id(request: Request) -> str:
    candidate = (request.headers.get(REQUEST_ID_HEADER) or "").strip()
    if _ACCEPTED_ID.match(candidate):
        return candidate
    return str(uuid.uuid4())


class RequestIdMiddleware(BaseHTTPMiddleware):
    """
    Correlation id for every CRM API call.

    The id lands on ``request.state.request_id`` (error envelopes report it as
    ``correlation_id``), in the structlog context of the request, and on the
    response header. Tenant context bound later by the tenant gate is cleared
    together with it once the response is out.
    """

    async def dispatch(self, request: Request, call_next: RequestResponseEndpoint) -> Response:
        request_id = _incoming_request_id(request)
        request.state.request_id = request_id
        bind_request_context(request_id=request_id)

        try:
            response = await call_next(request)
        finally:
            clear_request_context()
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
