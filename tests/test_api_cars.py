"""Tests for car API endpoints over a stubbed car repository."""

from __future__ import annotations

from decimal import Decimal

from fastapi import FastAPI
from fastapi.testclient import TestClient

from fleetmanager.api.routers import api_create_cars_router
from fleetmanager.db import RecordOwnershipConflictError
from fleetmanager.domain import Car


class _CarRepositoryStub:
    """In-memory car repository recording writes."""

    def __init__(self, cars: list[Car] | None = None, foreign_car_ids: tuple[str, ...] = ()):
        self.cars = {car.id: car for car in cars or []}
        self.foreign_car_ids = foreign_car_ids
        self.deleted_car_ids: list[str] = []

    def db_car_list(self) -> list[Car]:
        """Return stored cars ordered by identifier."""

        return [self.cars[car_id] for car_id in sorted(self.cars)]

    def db_car_save(self, car: Car) -> None:
        """Store one car unless another owner holds its identifier.

        Raises:
            RecordOwnershipConflictError: Raised for configured foreign identifiers.
        """

        if car.id in self.foreign_car_ids:
            raise RecordOwnershipConflictError("car", car.id)
        self.cars[car.id] = car

    def db_car_delete(self, car_id: str) -> None:
        """Remove one car if present."""

        self.deleted_car_ids.append(car_id)
        self.cars.pop(car_id, None)


def _build_client(car_repository: _CarRepositoryStub) -> TestClient:
    """Create a test client with only the cars router mounted."""

    application = FastAPI()
    application.include_router(api_create_cars_router(car_repository))
    return TestClient(application)


def test_api_cars_list_returns_envelope() -> None:
    """List cars with display names and money as strings.

    Returns:
        None: Assertions validate list payload.

    Raises:
        AssertionError: Raised when payload deviates.
    """

    car_repository = _CarRepositoryStub(
        [Car(id="c1", nickname="Falcon", make="Toyota", model="Camry", installment=Decimal("1500.50"))]
    )

    response = _build_client(car_repository).get("/cars")

    assert response.status_code == 200
    assert response.json()["returned"] == 1
    assert response.json()["items"][0]["display_name"] == "Falcon · Toyota Camry"
    assert response.json()["items"][0]["installment"] == "1500.50"
    assert response.json()["items"][0]["annual_insurance_amount"] == "0"


def test_api_cars_upsert_stores_car() -> None:
    """Create a car from the request body and path identifier.

    Returns:
        None: Assertions validate stored car.

    Raises:
        AssertionError: Raised when the stored car deviates.
    """

    car_repository = _CarRepositoryStub()

    response = _build_client(car_repository).put(
        "/cars/c7",
        json={"make": "Nissan", "model": "Sunny", "year": 2021, "installment": "900.00", "is_active": False},
    )

    assert response.status_code == 200
    assert response.json()["car_id"] == "c7"
    assert response.json()["display_name"] == "Nissan Sunny"
    stored_car = car_repository.cars["c7"]
    assert stored_car.year == 2021
    assert stored_car.installment == Decimal("900.00")
    assert stored_car.is_active is False


def test_api_cars_upsert_validates_body() -> None:
    """Reject negative money and out-of-range model years.

    Returns:
        None: Assertions validate request validation.

    Raises:
        AssertionError: Raised when invalid bodies are accepted.
    """

    car_repository = _CarRepositoryStub()
    client = _build_client(car_repository)

    assert client.put("/cars/c1", json={"installment": "-1"}).status_code == 422
    assert client.put("/cars/c1", json={"year": 1800}).status_code == 422
    blank_id_response = client.put("/cars/%20", json={})
    assert blank_id_response.status_code == 400
    assert blank_id_response.json()["code"] == "INVALID_CAR_ID"
    assert car_repository.cars == {}


def test_api_cars_delete_acknowledges_removal() -> None:
    """Delete one car and acknowledge the identifier.

    Returns:
        None: Assertions validate deletion.

    Raises:
        AssertionError: Raised when deletion deviates.
    """

    car_repository = _CarRepositoryStub([Car(id="c1")])

    response = _build_client(car_repository).delete("/cars/c1")

    assert response.json() == {"status": "deleted", "car_id": "c1"}
    assert car_repository.deleted_car_ids == ["c1"]
    assert car_repository.cars == {}


def test_api_cars_upsert_reports_ownership_conflict() -> None:
    """Return HTTP 409 when the car id is held by another owner.

    Returns:
        None: Assertions validate the conflict envelope.

    Raises:
        AssertionError: Raised when the rejected write is reported as stored.
    """

    car_repository = _CarRepositoryStub(foreign_car_ids=("shared",))

    response = _build_client(car_repository).put("/cars/shared", json={"make": "Toyota"})

    assert response.status_code == 409
    assert response.json() == {
        "status": "error",
        "code": "CAR_OWNERSHIP_CONFLICT",
        "message": "car id='shared' belongs to another owner",
    }
    assert car_repository.cars == {}
