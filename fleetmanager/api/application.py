"""FastAPI application factory for the fleet analytics service.

This module defines API application composition used by the runtime.
"""

from decimal import Decimal

from fastapi import FastAPI

from fleetmanager.analytics import AnalyticsPort
from fleetmanager.config import AppSettings
from fleetmanager.db import CarRepositoryPort, DatabaseHealthPort

from .routers import api_create_analytics_router, api_create_cars_router, api_create_health_router

_SERVICE_NAME = "fleet-manager"


def create_api_application(
    settings: AppSettings,
    db_health_service: DatabaseHealthPort,
    analytics_service: AnalyticsPort,
    car_repository: CarRepositoryPort,
) -> FastAPI:
    """Create the FastAPI application instance for the service.

    Args:
        settings: Validated application settings used for runtime metadata.
        db_health_service: Database health service used by health endpoints.
        analytics_service: Analytics service used by analytics endpoints.
        car_repository: Owner-scoped car repository used by car endpoints.

    Returns:
        FastAPI: Framework application instance with all routers mounted.

    Raises:
        RuntimeError: Raised if application initialization fails.
    """
    application = FastAPI(title="Fleet Manager Analytics")

    @application.get("/", tags=["foundation"])
    def foundation_index() -> dict[str, str]:
        """Return a minimal service descriptor.

        Returns:
            dict[str, str]: Service name, environment and owner scope.

        Raises:
            RuntimeError: Raised if route handler cannot produce a response.
        """

        return {
            "service": _SERVICE_NAME,
            "status": "ready",
            "environment": settings.environment_name,
            "owner_id": settings.owner_id,
        }

    application.include_router(api_create_health_router(db_health_service=db_health_service, service_name=_SERVICE_NAME))
    application.include_router(
        api_create_analytics_router(
            analytics_service=analytics_service,
            high_income_threshold=Decimal(str(settings.high_income_threshold)),
            medium_income_threshold=Decimal(str(settings.medium_income_threshold)),
        )
    )
    application.include_router(api_create_cars_router(car_repository=car_repository))

    return application
