# routers/__init__.py

from .wizards import router as wizards_router
from .health import router as health_router

__all__ = ["wizards_router", "health_router"]
