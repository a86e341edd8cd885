"""
Structured logging using structlog with:
- JSON/console switchable format
- Correlation ID + request context (request id, path, method, tenant id)
- PII redaction for CRM contact data (emails, phone numbers)
- Safe defaults for Uvicorn/SQLAlchemy/Alembic
- Tiny helper for perf timing

"""

from __future__ import annotations

import contextlib
import datetime
import logging
import logging.config
import re
import sys
import time
from typing import Any, Dict, Iterable, Optional

import structlog

from src.config import Settings, get_settings

# ---------------------------------------------------------------------
# PII redaction
# ---------------------------------------------------------------------


class PIIRedactionProcessor:
    """
    Structlog processor to redact PII from strings inside event_dict (recursively).
    - Email: keep domain, redact local-part.
    - Phone (E.164 preferred): keep first 2 and last 4.
    """
    P_EMAIL = re.compile(r"\b([A-Za-z0-9._%+-]+)@([A-Za-z0-9.-]+\.[A-Za-z]{2,})\b")
    # E.164: + followed by 8..15 digits
    P_PHONE = re.compile(r"\+[1-9]\d{7,14}\b")

    def __call__(self, logger, method_name, event_dict):
        return self._redact(event_dict)

    def _redact(self, value: Any) -> Any:
        if isinstance(value, dict):
            return {k: self._redact(v) for k, v in value.items()}
        if isinstance(value, (list, tuple)):
            return [self._redact(v) for v in value]
        if isinstance(value, str):
            return self._redact_str(value)
        return value

    def _redact_str(self, s: str) -> str:
        s = self.P_EMAIL.sub(lambda m: f"***@{m.group(2)}", s)
        s = self.P_PHONE.sub(lambda m: f"{m.group(0)[:2]}****{m.group(0)[-4:]}", s)
        return s


# ---------------------------------------------------------------------
# Context processors
# ---------------------------------------------------------------------


def add_request_context(logger, method_name, event_dict):
    """
    Copy a few standard request fields from contextvars into the event.
    Bind more via `bind_request_context(...)` during request handling.
    """
    ctx = structlog.contextvars.get_contextvars()
    for key in ("request_id", "tenant_id", "path", "method", "client_ip"):
        if key in ctx and key not in event_dict:
            event_dict[key] = ctx[key]
    return event_dict


def add_timestamp(logger, method_name, event_dict):
    # UTC ISO8601 Z
    now = datetime.datetime.now(datetime.timezone.utc)
    event_dict["timestamp"] = now.strftime("%Y-%m-%dT%H:%M:%SZ")
    return event_dict


def _passthrough(logger, method_name, event_dict):
    return event_dict


# ---------------------------------------------------------------------
# Public helpers to use from API code
# ---------------------------------------------------------------------


def bind_request_context(
    *,
    request_id: Optional[str] = None,
    path: Optional[str] = None,
    method: Optional[str] = None,
    tenant_id: Optional[str] = None,
    client_ip: Optional[str] = None,
) -> None:
    """Bind standard request context fields (call in middleware/dependencies)."""
    payload = {
        k: v
        for k, v in dict(
            request_id=request_id,
            path=path,
            method=method,
            tenant_id=tenant_id,
            client_ip=client_ip,
        ).items()
        if v is not None
    }
    if payload:
        structlog.contextvars.bind_contextvars(**payload)


def clear_request_context() -> None:
    """Clear all bound contextvars (call at end of request)."""
    structlog.contextvars.clear_contextvars()


@contextlib.contextmanager
def time_block(name: str, *, logger: Optional[Any] = None, labels: Optional[Dict[str, str]] = None):
    """
    Context manager to time a block and log as a performance metric.
    Usage:
        with time_block("tenant.provision", logger=log, labels={"schema": name}):
            await provisioner.provision(name)
    """
    _log = logger or structlog.get_logger("performance")
    t0 = time.perf_counter()
    try:
        yield
    finally:
        ms = round((time.perf_counter() - t0) * 1000.0, 2)
        _log.info("Performance metric", metric_name=name, value=ms, unit="ms", labels=labels or {})


# ---------------------------------------------------------------------
# Setup
# ---------------------------------------------------------------------

def _level_name_to_int(level: str) -> int:
    return getattr(logging, level.upper(), logging.INFO)


def build_processors(settings: Settings) -> list:
    is_prod_like = settings.is_prod or settings.is_staging
    processors: Iterable[Any] = [
        structlog.contextvars.merge_contextvars,
        add_timestamp,
        add_request_context,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        # Redact only outside of local/dev to help debugging locally
        (PIIRedactionProcessor() if is_prod_like else _passthrough),
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        (structlog.processors.JSONRenderer() if settings.log_format == "json" else structlog.dev.ConsoleRenderer()),
    ]
    return list(processors)


def setup_logging(settings: Optional[Settings] = None) -> None:
    """Idempotent structured logging configuration."""
    settings = settings or get_settings()
    log_format = settings.log_format
    is_prod_like = settings.is_prod or settings.is_staging

    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "()": "pythonjsonlogger.json.JsonFormatter",
                "format": "%(asctime)s %(name)s %(levelname)s %(message)s",
                "datefmt": "%Y-%m-%dT%H:%M:%S",
            },
            "console": {
                "format": "%(message)s",
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json" if log_format == "json" else "console",
                "stream": sys.stdout,
            },
        },
        "root": {
            "level": _level_name_to_int(settings.LOG_LEVEL),
            "handlers": ["console"],
        },
        "loggers": {
            # Quiet noisy libs, but keep errors
            "uvicorn.error": {"level": "INFO", "handlers": ["console"], "propagate": False},
            "uvicorn.access": {"level": "WARNING", "handlers": ["console"], "propagate": False},
            "sqlalchemy.engine": {
                "level": "WARNING" if is_prod_like else "INFO",
                "handlers": ["console"],
                "propagate": False,
            },
            "alembic": {"level": "INFO", "handlers": ["console"], "propagate": False},
        },
    }
    logging.config.dictConfig(logging_config)

    structlog.configure(
        processors=build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    # Clear any inherited context
    structlog.contextvars.clear_contextvars()


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Get a structured logger instance."""
    return structlog.get_logger(name)
