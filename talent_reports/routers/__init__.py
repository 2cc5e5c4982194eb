"""Routers package - API endpoint routers."""

from .health import router as health_router
from .reports import router as reports_router
from .surveys import router as surveys_router

__all__ = [
    "health_router",
    "reports_router",
    "surveys_router",
]
