from __future__ import annotations

from typing import Any, Dict

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncEngine
import structlog

logger = structlog.get_logger(__name__)


class DatabaseHealthCheck:
    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine

    async def check_connection(self) -> Dict[str, Any]:
        try:
            async with self._engine.connect() as conn:
                res = await conn.execute(text("SELECT 1 AS health_check"))
                row = res.fetchone()
                if not row or row.health_check != 1:
                    return {"healthy": False, "error": "health check failed"}

            payload: Dict[str, Any] = {"healthy": True}
            pool = self._engine.pool
            for name in ("size", "checkedin", "checkedout", "overflow"):
                if hasattr(pool, name):
                    payload[name if name != "size" else "pool_size"] = getattr(pool, name)()  # type: ignore
            return payload
        except Exception as e:
            logger.error("Database health check failed", error=str(e))
            return {"healthy": False, "error": str(e)}
