"""Car API router composition for the owner's car list."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from fleetmanager.db import CarRepositoryPort, RecordOwnershipConflictError
from fleetmanager.domain import Car

from .analytics import api_error_response


class CarUpsertRequest(BaseModel):
    """Request body for creating or replacing one car."""

    nickname: str = ""
    make: str = ""
    model: str = ""
    year: int | None = Field(default=None, ge=1900, le=2100)
    license_plate: str = ""
    color: str = ""
    is_active: bool = True
    installment: Decimal = Field(default=Decimal("0"), ge=0)
    annual_insurance_amount: Decimal = Field(default=Decimal("0"), ge=0)


def api_create_cars_router(car_repository: CarRepositoryPort) -> APIRouter:
    """Create car router exposing list, upsert and delete endpoints.

    Args:
        car_repository: DB-layer car repository scoped to the owner.

    Returns:
        APIRouter: Router exposing `/cars` endpoints.

    Raises:
        ValueError: Raised when car_repository is invalid.
    """

    if car_repository is None:
        raise ValueError("car_repository must not be None")

    router = APIRouter(prefix="/cars", tags=["cars"])

    @router.get("")
    def api_car_list() -> JSONResponse:
        """List the owner's cars.

        Returns:
            JSONResponse: Car list envelope payload.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        cars = car_repository.db_car_list()
        payload = {"items": [api_serialize_car(car) for car in cars], "returned": len(cars)}
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.put("/{car_id}")
    def api_car_upsert(car_id: str, request: CarUpsertRequest) -> JSONResponse:
        """Create or replace one car.

        Args:
            car_id: Car identifier.
            request: Car attributes.

        Returns:
            JSONResponse: Stored car payload.
            Returns a 409 error envelope when the car id belongs to another owner.

        Raises:
            RuntimeError: Raised when repository write fails.
        """

        normalized_car_id = car_id.strip()
        if not normalized_car_id:
            return api_error_response(code="INVALID_CAR_ID", message="car_id must not be blank")

        car = Car(id=normalized_car_id, **request.model_dump())
        try:
            car_repository.db_car_save(car)
        except RecordOwnershipConflictError as error:
            return api_error_response(
                code="CAR_OWNERSHIP_CONFLICT",
                message=str(error),
                status_code=status.HTTP_409_CONFLICT,
            )
        return JSONResponse(content=api_serialize_car(car), status_code=status.HTTP_200_OK)

    @router.delete("/{car_id}")
    def api_car_delete(car_id: str) -> JSONResponse:
        """Delete one car; deleting a missing car succeeds.

        Args:
            car_id: Car identifier.

        Returns:
            JSONResponse: Deletion acknowledgement.

        Raises:
            RuntimeError: Raised when repository write fails.
        """

        normalized_car_id = car_id.strip()
        if not normalized_car_id:
            return api_error_response(code="INVALID_CAR_ID", message="car_id must not be blank")

        car_repository.db_car_delete(normalized_car_id)
        return JSONResponse(content={"status": "deleted", "car_id": normalized_car_id}, status_code=status.HTTP_200_OK)

    return router


def api_serialize_car(car: Car) -> dict[str, object]:
    """Serialize one car to JSON payload.

    Args:
        car: Car entity.

    Returns:
        dict[str, object]: JSON-serializable car payload.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    return {
        "car_id": car.id,
        "display_name": car.display_name,
        "nickname": car.nickname,
        "make": car.make,
        "model": car.model,
        "year": car.year,
        "license_plate": car.license_plate,
        "color": car.color,
        "is_active": car.is_active,
        "installment": str(car.installment),
        "annual_insurance_amount": str(car.annual_insurance_amount),
    }


__all__ = ["CarUpsertRequest", "api_create_cars_router", "api_serialize_car"]
