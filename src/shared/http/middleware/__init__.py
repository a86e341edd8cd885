from .logging_middleware import LoggingMiddleware
from .request_id_middleware import REQUEST_ID_HEADER, RequestIdMiddleware
from .security_middleware import SecurityHeadersMiddleware
from .setup import setup_http_middlewares

__all__ = [
    "LoggingMiddleware",
    "REQUEST_ID_HEADER",
    "RequestIdMiddleware",
    "SecurityHeadersMiddleware",
    "setup_http_middlewares",
]
