"""API route modules."""

from .events import router as events_router
from .health import router as health_router
from .reports import router as reports_router
from .stats import router as stats_router

__all__ = ["events_router", "health_router", "reports_router", "stats_router"]
