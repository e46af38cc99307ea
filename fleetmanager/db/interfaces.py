"""Typed interfaces for database-layer services.

All SQL access must remain in the db package and its submodules.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from typing import Protocol

from fleetmanager.domain import Car, DailyEntry, Driver, Expense, HealthStatus

CarListener = Callable[[list[Car]], None]


class DatabaseHealthPort(Protocol):
    """Port definition for database connectivity verification."""

    def db_connection_label(self) -> str:
        """Return a stable label for the active database connection target.

        Returns:
            str: Database target label for diagnostics.

        Raises:
            RuntimeError: Raised when connection metadata is unavailable.
        """

    def db_check_health(self) -> HealthStatus:
        """Check database connectivity and return deterministic health payload.

        Returns:
            HealthStatus: Database health status payload.

        Raises:
            ConnectionError: Raised when database cannot be reached.
        """


class CarSubscriptionPort(Protocol):
    """Handle returned by a car stream subscription."""

    def unsubscribe(self) -> None:
        """Stop delivering car list updates to the listener."""


class CarRepositoryPort(Protocol):
    """Port definition for the owner's cars with live updates."""

    def db_car_list(self) -> list[Car]:
        """Return the owner's cars in deterministic order.

        Returns:
            list[Car]: Cars ordered by display fields and identifier.

        Raises:
            RuntimeError: Raised when the database read fails.
        """

    def db_car_stream_subscribe(self, listener: CarListener) -> CarSubscriptionPort:
        """Subscribe to the continuously updated car list.

        The listener receives the current list immediately and again after
        every write made through this repository.

        Args:
            listener: Callback receiving the full car list.

        Returns:
            CarSubscriptionPort: Handle used to unsubscribe.

        Raises:
            RuntimeError: Raised when the initial read fails.
        """

    def db_car_save(self, car: Car) -> None:
        """Insert or replace one car.

        Args:
            car: Car to persist.

        Raises:
            ValueError: Raised when the car identifier is blank.
            RecordOwnershipConflictError: Raised when the identifier belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

    def db_car_delete(self, car_id: str) -> None:
        """Delete one car by identifier.

        Args:
            car_id: Car identifier.

        Raises:
            ValueError: Raised when the identifier is blank.
            RuntimeError: Raised when the database write fails.
        """


class FleetRecordRepositoryPort(Protocol):
    """Port definition for daily entries, expenses and drivers of one owner."""

    def db_daily_entry_list(
        self,
        owner_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[DailyEntry]:
        """List entries inside optional inclusive date bounds.

        Args:
            owner_id: Fleet owner identifier.
            date_from: Optional inclusive lower bound.
            date_to: Optional inclusive upper bound.

        Returns:
            list[DailyEntry]: Entries ordered by date and identifier.

        Raises:
            ValueError: Raised when input values are invalid.
            RuntimeError: Raised when the database read fails.
        """

    def db_expense_list(
        self,
        owner_id: str,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Expense]:
        """List expenses inside optional inclusive date bounds.

        Args:
            owner_id: Fleet owner identifier.
            date_from: Optional inclusive lower bound.
            date_to: Optional inclusive upper bound.

        Returns:
            list[Expense]: Expenses ordered by date and identifier.

        Raises:
            ValueError: Raised when input values are invalid.
            RuntimeError: Raised when the database read fails.
        """

    def db_driver_list(self, owner_id: str) -> list[Driver]:
        """List the owner's drivers ordered by name.

        Raises:
            RuntimeError: Raised when the database read fails.
        """

    def db_daily_entry_save(self, owner_id: str, entry: DailyEntry) -> None:
        """Insert or replace one entry.

        Raises:
            ValueError: Raised when the entry is invalid.
            RecordOwnershipConflictError: Raised when the identifier belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

    def db_daily_entry_delete(self, owner_id: str, entry_id: str) -> None:
        """Delete one entry.

        Raises:
            RuntimeError: Raised when the database write fails.
        """

    def db_expense_save(self, owner_id: str, expense: Expense) -> None:
        """Insert or replace one expense.

        Raises:
            ValueError: Raised when the expense is invalid.
            RecordOwnershipConflictError: Raised when the identifier belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

    def db_expense_delete(self, owner_id: str, expense_id: str) -> None:
        """Delete one expense.

        Raises:
            RuntimeError: Raised when the database write fails.
        """

    def db_driver_save(self, owner_id: str, driver: Driver) -> None:
        """Insert or replace one driver.

        Raises:
            ValueError: Raised when the driver identifier is blank.
            RecordOwnershipConflictError: Raised when the identifier belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """
