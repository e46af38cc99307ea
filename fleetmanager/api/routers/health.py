"""Health endpoint router reporting service, database and schema state."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from fleetmanager.db import DatabaseHealthPort


def api_create_health_router(db_health_service: DatabaseHealthPort, service_name: str = "fleet-manager") -> APIRouter:
    """Create health-check router for load balancers and operators.

    The service is healthy only when the database is reachable and migrated;
    an unreachable or unmigrated database yields HTTP 503.

    Args:
        db_health_service: DB-layer health service interface.
        service_name: Service label echoed in every payload.

    Returns:
        APIRouter: Router exposing `/health` endpoint.

    Raises:
        ValueError: Raised when db_health_service is invalid.
    """

    if db_health_service is None:
        raise ValueError("db_health_service must not be None")

    router = APIRouter(tags=["health"])

    @router.get("/health")
    def api_health_status() -> JSONResponse:
        """Return application and database health state.

        Returns:
            JSONResponse: Health payload, 200 when healthy and 503 otherwise.

        Raises:
            RuntimeError: Connectivity failures are reported in the payload.
        """

        try:
            db_health = db_health_service.db_check_health()
            database_state, detail = db_health.status, db_health.detail
        except ConnectionError as error:
            database_state, detail = "down", str(error)

        is_healthy = database_state == "ok"
        payload = {
            "status": "ok" if is_healthy else "degraded",
            "service": service_name,
            "app": "up",
            "database": database_state,
            "detail": detail,
            "target": db_health_service.db_connection_label(),
        }
        response_status = status.HTTP_200_OK if is_healthy else status.HTTP_503_SERVICE_UNAVAILABLE
        return JSONResponse(content=payload, status_code=response_status)

    return router


__all__ = ["api_create_health_router"]
