# /src/shared/http/responses.py
"""
HTTP response helpers (success envelopes).

- ok(data, message=None, status=200, headers=None)
- created(data, message=None, location=None)

Errors are rendered by the handlers in ``src.shared.exceptions``.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from fastapi.encoders import jsonable_encoder
from starlette.responses import JSONResponse


def _envelope(data: Any, message: Optional[str]) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": True, "data": jsonable_encoder(data)}
    if message:
        body["message"] = message
    return body


def ok(data: Any, message: Optional[str] = None, status: int = 200, headers: Optional[Dict[str, str]] = None) -> JSONResponse:
    return JSONResponse(_envelope(data, message), status_code=status, headers=headers or {})


def created(data: Any, message: Optional[str] = None, location: Optional[str] = None) -> JSONResponse:
    headers = {}
    if location:
        headers["Location"] = location
    return JSONResponse(_envelope(data, message), status_code=201, headers=headers)
