"""API router package for endpoint composition."""

from .analytics import api_create_analytics_router
from .cars import api_create_cars_router
from .health import api_create_health_router

__all__ = ["api_create_analytics_router", "api_create_cars_router", "api_create_health_router"]
