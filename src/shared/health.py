from datetime import datetime, timezone

from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from src.dependencies import AppContainer, get_container

router = APIRouter(tags=["Health"])


@router.get("/health")
async def health(container: AppContainer = Depends(get_container)):
    result = await container.health_check.check_connection()
    healthy = bool(result.get("healthy"))
    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ok" if healthy else "error",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "database": "connected" if healthy else "disconnected",
            "tenant_pools": len(container.pool_resolver),
        },
    )
