from __future__ import annotations

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.config import Settings
from .logging_middleware import LoggingMiddleware
from .request_id_middleware import RequestIdMiddleware
from .security_middleware import SecurityHeadersMiddleware


def setup_http_middlewares(app: FastAPI, settings: Settings) -> None:
    """
    Install middlewares. Starlette runs the last added one first, so the
    order below is inner → outer.
    """
    # 1) Structured access logging (innermost, sees the final status)
    app.add_middleware(LoggingMiddleware)

    # 2) Security hardening
    app.add_middleware(SecurityHeadersMiddleware)

    # 3) CORS
    origins = settings.cors_origins()
    app.add_middleware(
        CORSMiddleware,
        allow_origins=origins,
        allow_methods=["*"],
        allow_headers=["*"],
        allow_credentials="*" not in origins,
    )

    # 4) Correlation id (outermost, used by everything else)
    app.add_middleware(RequestIdMiddleware)
