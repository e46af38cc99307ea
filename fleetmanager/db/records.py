"""Database service for daily entries, expenses and drivers.

Statements stay portable across PostgreSQL and SQLite: dates are bound as ISO
strings, money as decimal strings, and row values are coerced on read.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from datetime import date, datetime
from decimal import Decimal
from typing import Any

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from fleetmanager.domain import DailyEntry, Driver, Expense, ExpenseType

from .errors import RecordOwnershipConflictError
from .interfaces import FleetRecordRepositoryPort

_DAILY_ENTRY_UPSERT_SQL = (
    "INSERT INTO daily_entry ("
    "daily_entry_id, owner_id, entry_date, driver_id, driver_name, vehicle_id, vehicle, "
    "uber_earnings, yango_earnings, private_jobs_earnings, notes, photo_urls"
    ") VALUES ("
    ":daily_entry_id, :owner_id, :entry_date, :driver_id, :driver_name, :vehicle_id, :vehicle, "
    ":uber_earnings, :yango_earnings, :private_jobs_earnings, :notes, :photo_urls"
    ") "
    "ON CONFLICT (daily_entry_id) DO UPDATE SET "
    "entry_date = excluded.entry_date, "
    "driver_id = excluded.driver_id, "
    "driver_name = excluded.driver_name, "
    "vehicle_id = excluded.vehicle_id, "
    "vehicle = excluded.vehicle, "
    "uber_earnings = excluded.uber_earnings, "
    "yango_earnings = excluded.yango_earnings, "
    "private_jobs_earnings = excluded.private_jobs_earnings, "
    "notes = excluded.notes, "
    "photo_urls = excluded.photo_urls, "
    "updated_at_utc = CURRENT_TIMESTAMP "
    "WHERE daily_entry.owner_id = excluded.owner_id"
)

_EXPENSE_UPSERT_SQL = (
    "INSERT INTO expense ("
    "expense_id, owner_id, expense_type, amount, expense_date, driver_id, driver_name, vehicle, notes, photo_urls"
    ") VALUES ("
    ":expense_id, :owner_id, :expense_type, :amount, :expense_date, :driver_id, :driver_name, :vehicle, "
    ":notes, :photo_urls"
    ") "
    "ON CONFLICT (expense_id) DO UPDATE SET "
    "expense_type = excluded.expense_type, "
    "amount = excluded.amount, "
    "expense_date = excluded.expense_date, "
    "driver_id = excluded.driver_id, "
    "driver_name = excluded.driver_name, "
    "vehicle = excluded.vehicle, "
    "notes = excluded.notes, "
    "photo_urls = excluded.photo_urls, "
    "updated_at_utc = CURRENT_TIMESTAMP "
    "WHERE expense.owner_id = excluded.owner_id"
)

_DRIVER_UPSERT_SQL = (
    "INSERT INTO driver ("
    "driver_id, owner_id, name, salary, annual_visa_cost, annual_license_cost, is_active"
    ") VALUES ("
    ":driver_id, :owner_id, :name, :salary, :annual_visa_cost, :annual_license_cost, :is_active"
    ") "
    "ON CONFLICT (driver_id) DO UPDATE SET "
    "name = excluded.name, "
    "salary = excluded.salary, "
    "annual_visa_cost = excluded.annual_visa_cost, "
    "annual_license_cost = excluded.annual_license_cost, "
    "is_active = excluded.is_active, "
    "updated_at_utc = CURRENT_TIMESTAMP "
    "WHERE driver.owner_id = excluded.owner_id"
)


class SQLAlchemyFleetRecordRepository(FleetRecordRepositoryPort):
    """SQLAlchemy-backed store for one or more owners' fleet records."""

    def __init__(self, engine: Engine):
        """Initialize fleet record persistence service.

        Args:
            engine: SQLAlchemy engine used for all persistence operations.

        Returns:
            None: This initializer does not return a value.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

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
            ValueError: Raised when owner_id is blank or bounds are reversed.
            RuntimeError: Raised when the database read fails.
        """

        normalized_owner_id = self._validate_non_empty_text(owner_id, "owner_id")
        where_sql, parameters = self._build_date_bounds("entry_date", normalized_owner_id, date_from, date_to)
        rows = self._db_fetch_all(
            "SELECT daily_entry_id, entry_date, driver_id, driver_name, vehicle_id, vehicle, "
            "uber_earnings, yango_earnings, private_jobs_earnings, notes, photo_urls "
            f"FROM daily_entry WHERE {where_sql} "
            "ORDER BY entry_date ASC, daily_entry_id ASC",
            parameters,
            "failed to list daily entries",
        )
        return [
            DailyEntry(
                id=str(row["daily_entry_id"]),
                entry_date=_db_coerce_date(row["entry_date"]),
                driver_name=str(row["driver_name"]),
                vehicle=str(row["vehicle"]),
                uber_earnings=_db_coerce_decimal(row["uber_earnings"]),
                yango_earnings=_db_coerce_decimal(row["yango_earnings"]),
                private_jobs_earnings=_db_coerce_decimal(row["private_jobs_earnings"]),
                notes=row["notes"] or "",
                photo_urls=_db_decode_photo_urls(row["photo_urls"]),
                driver_id=row["driver_id"] or "",
                vehicle_id=row["vehicle_id"] or "",
            )
            for row in rows
        ]

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
            ValueError: Raised when owner_id is blank or bounds are reversed.
            RuntimeError: Raised when the database read fails.
        """

        normalized_owner_id = self._validate_non_empty_text(owner_id, "owner_id")
        where_sql, parameters = self._build_date_bounds("expense_date", normalized_owner_id, date_from, date_to)
        rows = self._db_fetch_all(
            "SELECT expense_id, expense_type, amount, expense_date, driver_id, driver_name, vehicle, "
            "notes, photo_urls "
            f"FROM expense WHERE {where_sql} "
            "ORDER BY expense_date ASC, expense_id ASC",
            parameters,
            "failed to list expenses",
        )
        return [
            Expense(
                id=str(row["expense_id"]),
                expense_type=ExpenseType[str(row["expense_type"])],
                amount=_db_coerce_decimal(row["amount"]),
                expense_date=_db_coerce_date(row["expense_date"]),
                driver_name=str(row["driver_name"]),
                vehicle=str(row["vehicle"]),
                notes=row["notes"] or "",
                photo_urls=_db_decode_photo_urls(row["photo_urls"]),
                driver_id=row["driver_id"] or "",
            )
            for row in rows
        ]

    def db_driver_list(self, owner_id: str) -> list[Driver]:
        """List the owner's drivers ordered by name.

        Raises:
            ValueError: Raised when owner_id is blank.
            RuntimeError: Raised when the database read fails.
        """

        normalized_owner_id = self._validate_non_empty_text(owner_id, "owner_id")
        rows = self._db_fetch_all(
            "SELECT driver_id, name, salary, annual_visa_cost, annual_license_cost, is_active "
            "FROM driver WHERE owner_id = :owner_id "
            "ORDER BY name ASC, driver_id ASC",
            {"owner_id": normalized_owner_id},
            "failed to list drivers",
        )
        return [
            Driver(
                id=str(row["driver_id"]),
                name=str(row["name"]),
                salary=_db_coerce_decimal(row["salary"]),
                annual_visa_cost=_db_coerce_decimal(row["annual_visa_cost"]),
                annual_license_cost=_db_coerce_decimal(row["annual_license_cost"]),
                is_active=bool(row["is_active"]),
            )
            for row in rows
        ]

    def db_daily_entry_save(self, owner_id: str, entry: DailyEntry) -> None:
        """Insert or replace one entry.

        Raises:
            ValueError: Raised when owner_id is blank or the entry is invalid.
            RecordOwnershipConflictError: Raised when the id belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

        normalized_owner_id = self._validate_non_empty_text(owner_id, "owner_id")
        if not entry.is_valid():
            raise ValueError(f"invalid daily entry id={entry.id!r}")
        self._db_upsert(
            _DAILY_ENTRY_UPSERT_SQL,
            {
                "daily_entry_id": entry.id,
                "owner_id": normalized_owner_id,
                "entry_date": entry.entry_date.isoformat(),
                "driver_id": entry.driver_id or None,
                "driver_name": entry.driver_name,
                "vehicle_id": entry.vehicle_id or None,
                "vehicle": entry.vehicle,
                "uber_earnings": str(entry.uber_earnings),
                "yango_earnings": str(entry.yango_earnings),
                "private_jobs_earnings": str(entry.private_jobs_earnings),
                "notes": entry.notes,
                "photo_urls": json.dumps(list(entry.photo_urls)),
            },
            "failed to save daily entry",
            "daily_entry",
            entry.id,
        )

    def db_daily_entry_delete(self, owner_id: str, entry_id: str) -> None:
        """Delete one entry; deleting a missing entry is a no-op.

        Raises:
            ValueError: Raised when an identifier is blank.
            RuntimeError: Raised when the database write fails.
        """

        self._db_execute(
            "DELETE FROM daily_entry WHERE owner_id = :owner_id AND daily_entry_id = :daily_entry_id",
            {
                "owner_id": self._validate_non_empty_text(owner_id, "owner_id"),
                "daily_entry_id": self._validate_non_empty_text(entry_id, "entry_id"),
            },
            "failed to delete daily entry",
        )

    def db_expense_save(self, owner_id: str, expense: Expense) -> None:
        """Insert or replace one expense.

        Raises:
            ValueError: Raised when owner_id is blank or the expense is invalid.
            RecordOwnershipConflictError: Raised when the id belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

        normalized_owner_id = self._validate_non_empty_text(owner_id, "owner_id")
        validation_errors = expense.validation_errors()
        if validation_errors:
            raise ValueError(f"invalid expense id={expense.id!r}: {'; '.join(validation_errors)}")
        self._db_upsert(
            _EXPENSE_UPSERT_SQL,
            {
                "expense_id": expense.id,
                "owner_id": normalized_owner_id,
                "expense_type": expense.expense_type.name,
                "amount": str(expense.amount),
                "expense_date": expense.expense_date.isoformat(),
                "driver_id": expense.driver_id or None,
                "driver_name": expense.driver_name,
                "vehicle": expense.vehicle,
                "notes": expense.notes,
                "photo_urls": json.dumps(list(expense.photo_urls)),
            },
            "failed to save expense",
            "expense",
            expense.id,
        )

    def db_expense_delete(self, owner_id: str, expense_id: str) -> None:
        """Delete one expense; deleting a missing expense is a no-op.

        Raises:
            ValueError: Raised when an identifier is blank.
            RuntimeError: Raised when the database write fails.
        """

        self._db_execute(
            "DELETE FROM expense WHERE owner_id = :owner_id AND expense_id = :expense_id",
            {
                "owner_id": self._validate_non_empty_text(owner_id, "owner_id"),
                "expense_id": self._validate_non_empty_text(expense_id, "expense_id"),
            },
            "failed to delete expense",
        )

    def db_driver_save(self, owner_id: str, driver: Driver) -> None:
        """Insert or replace one driver.

        Raises:
            ValueError: Raised when owner_id or the driver identifier is blank.
            RecordOwnershipConflictError: Raised when the id belongs to another owner.
            RuntimeError: Raised when the database write fails.
        """

        driver_id = self._validate_non_empty_text(driver.id, "driver.id")
        self._db_upsert(
            _DRIVER_UPSERT_SQL,
            {
                "driver_id": driver_id,
                "owner_id": self._validate_non_empty_text(owner_id, "owner_id"),
                "name": driver.name,
                "salary": str(driver.salary),
                "annual_visa_cost": str(driver.annual_visa_cost),
                "annual_license_cost": str(driver.annual_license_cost),
                "is_active": driver.is_active,
            },
            "failed to save driver",
            "driver",
            driver_id,
        )

    def _db_fetch_all(
        self,
        sql: str,
        parameters: Mapping[str, Any],
        error_message: str,
    ) -> list[Mapping[str, Any]]:
        try:
            with self._engine.connect() as connection:
                return list(connection.execute(text(sql), dict(parameters)).mappings().all())
        except SQLAlchemyError as error:
            raise RuntimeError(error_message) from error

    def _db_execute(self, sql: str, parameters: Mapping[str, Any], error_message: str) -> int:
        try:
            with self._engine.begin() as connection:
                return connection.execute(text(sql), dict(parameters)).rowcount
        except SQLAlchemyError as error:
            raise RuntimeError(error_message) from error

    def _db_upsert(
        self,
        sql: str,
        parameters: Mapping[str, Any],
        error_message: str,
        record_kind: str,
        record_id: str,
    ) -> None:
        """Run one owner-guarded upsert and reject identifiers held by another owner.

        Raises:
            RecordOwnershipConflictError: Raised when the guarded update matched no row.
            RuntimeError: Raised when the database write fails.
        """

        if self._db_execute(sql, parameters, error_message) == 0:
            raise RecordOwnershipConflictError(record_kind, record_id)

    @staticmethod
    def _build_date_bounds(
        column_name: str,
        owner_id: str,
        date_from: date | None,
        date_to: date | None,
    ) -> tuple[str, dict[str, Any]]:
        """Build the owner and inclusive date-range predicate for one date column."""

        if date_from is not None and date_to is not None and date_from > date_to:
            raise ValueError("date_from must be on or before date_to")

        clauses = ["owner_id = :owner_id"]
        parameters: dict[str, Any] = {"owner_id": owner_id}
        if date_from is not None:
            clauses.append(f"{column_name} >= :date_from")
            parameters["date_from"] = date_from.isoformat()
        if date_to is not None:
            clauses.append(f"{column_name} <= :date_to")
            parameters["date_to"] = date_to.isoformat()
        return " AND ".join(clauses), parameters

    @staticmethod
    def _validate_non_empty_text(value: str, field_name: str) -> str:
        """Validate and normalize required text input.

        Args:
            value: Input value.
            field_name: Field name for error messages.

        Returns:
            str: Trimmed value.

        Raises:
            ValueError: Raised when value is blank.
        """

        normalized_value = value.strip()
        if not normalized_value:
            raise ValueError(f"{field_name} must not be blank")
        return normalized_value


def _db_coerce_date(value: Any) -> date:
    """Convert a driver-native or ISO text date value to `date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def _db_coerce_decimal(value: Any) -> Decimal:
    if value is None:
        return Decimal("0")
    return Decimal(str(value))


def _db_decode_photo_urls(value: Any) -> tuple[str, ...]:
    if not value:
        return ()
    return tuple(str(url) for url in json.loads(value))


__all__ = ["SQLAlchemyFleetRecordRepository"]
