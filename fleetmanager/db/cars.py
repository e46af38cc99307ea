"""Database service for the owner's cars with live list subscriptions."""

from __future__ import annotations

import itertools
import logging
import threading
from collections.abc import Callable
from dataclasses import replace
from decimal import Decimal
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from fleetmanager.domain import Car

from .errors import RecordOwnershipConflictError
from .interfaces import CarListener, CarRepositoryPort, CarSubscriptionPort

logger = logging.getLogger(__name__)

_CAR_UPSERT_SQL = (
    "INSERT INTO car ("
    "car_id, user_id, nickname, make, model, year, license_plate, color, is_active, "
    "installment, annual_insurance_amount"
    ") VALUES ("
    ":car_id, :user_id, :nickname, :make, :model, :year, :license_plate, :color, :is_active, "
    ":installment, :annual_insurance_amount"
    ") "
    "ON CONFLICT (car_id) DO UPDATE SET "
    "nickname = excluded.nickname, "
    "make = excluded.make, "
    "model = excluded.model, "
    "year = excluded.year, "
    "license_plate = excluded.license_plate, "
    "color = excluded.color, "
    "is_active = excluded.is_active, "
    "installment = excluded.installment, "
    "annual_insurance_amount = excluded.annual_insurance_amount, "
    "updated_at_utc = CURRENT_TIMESTAMP "
    "WHERE car.user_id = excluded.user_id"
)


class CarSubscription(CarSubscriptionPort):
    """Subscription handle that detaches one listener when unsubscribed."""

    def __init__(self, detach: Callable[[], None]):
        self._detach = detach
        self._is_active = True

    @property
    def is_active(self) -> bool:
        """Return whether the listener still receives updates."""
        return self._is_active

    def unsubscribe(self) -> None:
        """Stop delivering car list updates; repeated calls are no-ops."""

        if self._is_active:
            self._is_active = False
            self._detach()


class SQLAlchemyCarRepository(CarRepositoryPort):
    """SQLAlchemy-backed car store scoped to one owner.

    Listeners are notified with the full car list after every write made
    through this instance. Writes made by other processes are not observed.
    Each write with its notification, and each subscription's initial read,
    registration and delivery, hold one repository lock; listeners observe
    every write in commit order.
    """

    def __init__(self, engine: Engine, owner_id: str):
        """Initialize car persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.
            owner_id: Owning user identifier applied to every statement.

        Returns:
            None: This initializer does not return a value.

        Raises:
            ValueError: Raised when engine is None or owner_id is blank.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        if not owner_id.strip():
            raise ValueError("owner_id must not be blank")
        self._engine = engine
        self._owner_id = owner_id.strip()
        self._listeners: dict[int, CarListener] = {}
        self._listener_ids = itertools.count(1)
        self._lock = threading.RLock()

    def db_car_list(self) -> list[Car]:
        """Return the owner's cars ordered by nickname, make, model and id.

        Returns:
            list[Car]: Owner cars.

        Raises:
            RuntimeError: Raised when the database read fails.
        """

        try:
            with self._engine.connect() as connection:
                rows = connection.execute(
                    text(
                        "SELECT car_id, user_id, nickname, make, model, year, license_plate, color, "
                        "is_active, installment, annual_insurance_amount "
                        "FROM car WHERE user_id = :user_id "
                        "ORDER BY nickname ASC, make ASC, model ASC, car_id ASC"
                    ),
                    {"user_id": self._owner_id},
                ).mappings().all()
        except SQLAlchemyError as error:
            raise RuntimeError("failed to list cars") from error
        return [self._map_car_row(row) for row in rows]

    def db_car_stream_subscribe(self, listener: CarListener) -> CarSubscription:
        """Subscribe to the car list; the current list is delivered immediately.

        Args:
            listener: Callback receiving the full car list.

        Returns:
            CarSubscription: Handle used to unsubscribe.

        Raises:
            ValueError: Raised when listener is None.
            RuntimeError: Raised when the initial read fails.
        """

        if listener is None:
            raise ValueError("listener must not be None")
        with self._lock:
            current_cars = self.db_car_list()
            listener_id = next(self._listener_ids)
            self._listeners[listener_id] = listener
            logger.debug("car listener subscribed owner_id=%s listener_id=%d", self._owner_id, listener_id)
            listener(current_cars)
        return CarSubscription(detach=lambda: self._db_car_detach_listener(listener_id))

    def db_car_save(self, car: Car) -> None:
        """Insert or replace one car owned by this repository's owner.

        Args:
            car: Car to persist; a blank user_id is filled with the owner id.

        Raises:
            ValueError: Raised when the car id is blank or it belongs to another user.
            RecordOwnershipConflictError: Raised when the stored car belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

        if not car.id.strip():
            raise ValueError("car.id must not be blank")
        if car.user_id.strip() and car.user_id.strip() != self._owner_id:
            raise ValueError("car.user_id does not match repository owner")
        owned_car = replace(car, user_id=self._owner_id)
        parameters = {
            "car_id": owned_car.id.strip(),
            "user_id": owned_car.user_id,
            "nickname": owned_car.nickname,
            "make": owned_car.make,
            "model": owned_car.model,
            "year": owned_car.year,
            "license_plate": owned_car.license_plate,
            "color": owned_car.color,
            "is_active": owned_car.is_active,
            "installment": str(owned_car.installment),
            "annual_insurance_amount": str(owned_car.annual_insurance_amount),
        }

        with self._lock:
            if self._db_execute(_CAR_UPSERT_SQL, parameters, "failed to save car") == 0:
                raise RecordOwnershipConflictError("car", owned_car.id.strip())
            logger.info("car saved owner_id=%s car_id=%s", self._owner_id, owned_car.id)
            self._db_car_notify_listeners()

    def db_car_delete(self, car_id: str) -> None:
        """Delete one car; deleting a missing car is a no-op.

        Args:
            car_id: Car identifier.

        Raises:
            ValueError: Raised when car_id is blank.
            RuntimeError: Raised when the database write fails.
        """

        normalized_car_id = car_id.strip()
        if not normalized_car_id:
            raise ValueError("car_id must not be blank")
        with self._lock:
            self._db_execute(
                "DELETE FROM car WHERE user_id = :user_id AND car_id = :car_id",
                {"user_id": self._owner_id, "car_id": normalized_car_id},
                "failed to delete car",
            )
            logger.info("car deleted owner_id=%s car_id=%s", self._owner_id, normalized_car_id)
            self._db_car_notify_listeners()

    def _db_execute(self, sql: str, parameters: dict[str, Any], error_message: str) -> int:
        try:
            with self._engine.begin() as connection:
                return connection.execute(text(sql), parameters).rowcount
        except SQLAlchemyError as error:
            raise RuntimeError(error_message) from error

    def _db_car_detach_listener(self, listener_id: int) -> None:
        with self._lock:
            self._listeners.pop(listener_id, None)
        logger.debug("car listener unsubscribed owner_id=%s listener_id=%d", self._owner_id, listener_id)

    def _db_car_notify_listeners(self) -> None:
        """Deliver the current list to every listener; callers hold the repository lock."""

        listeners = list(self._listeners.values())
        if not listeners:
            return
        cars = self.db_car_list()
        for listener in listeners:
            listener(list(cars))

    @staticmethod
    def _map_car_row(row: Any) -> Car:
        year = row["year"]
        return Car(
            id=str(row["car_id"]),
            user_id=str(row["user_id"]),
            nickname=row["nickname"] or "",
            make=row["make"] or "",
            model=row["model"] or "",
            year=None if year is None else int(year),
            license_plate=row["license_plate"] or "",
            color=row["color"] or "",
            is_active=bool(row["is_active"]),
            installment=Decimal(str(row["installment"] or 0)),
            annual_insurance_amount=Decimal(str(row["annual_insurance_amount"] or 0)),
        )


__all__ = ["CarSubscription", "SQLAlchemyCarRepository"]
