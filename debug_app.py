# debug_app.py
import os
import uvicorn

from src.config import get_settings

# ensure "src" is importable
os.environ.setdefault("PYTHONPATH", os.getcwd())

if __name__ == "__main__":
    settings = get_settings()
    uvicorn.run(
        "src.main:create_app",
        factory=True,
        host=settings.SERVER_HOST,
        port=settings.SERVER_PORT,
        reload=False,   # single process: one pool cache per process
        log_level=settings.LOG_LEVEL.lower(),
    )
