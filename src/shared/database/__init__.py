from .base_model import BaseModel
from .engine import create_database_engine, create_session_factory, ping
from .health import DatabaseHealthCheck

__all__ = [
    "BaseModel",
    "create_database_engine",
    "create_session_factory",
    "ping",
    "DatabaseHealthCheck",
]
