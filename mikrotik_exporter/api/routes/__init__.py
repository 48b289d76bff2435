"""API Routes."""

from .health import router as health_router
from .metrics import router as metrics_router
from .probe import router as probe_router

__all__ = [
    "health_router",
    "metrics_router",
    "probe_router",
]
