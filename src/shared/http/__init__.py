from .responses import created, ok

__all__ = ["ok", "created"]
