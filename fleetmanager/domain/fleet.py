"""Fleet source records shared across analytics, persistence and API layers.

Records are immutable once recorded. Money values use `Decimal` so that
aggregation stays exact for the sums and differences analytics report.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum

_EXPENSE_MAX_AMOUNT = Decimal("999999.99")
_EXPENSE_MAX_NOTES_LENGTH = 5000


class ExpenseType(Enum):
    """Expense categories with user-facing display names."""

    FUEL = "Fuel"
    CAR_WASH = "Car Wash"
    FINE = "Fine"
    MAINTENANCE = "Maintenance"
    SERVICE = "Service"
    OTHER = "Other"

    @property
    def display_name(self) -> str:
        """Return the user-facing category label."""
        return self.value

    @classmethod
    def from_display_name(cls, display_name: str) -> ExpenseType | None:
        """Resolve a category from its display name.

        Args:
            display_name: User-facing category label.

        Returns:
            ExpenseType | None: Matching category, else None.
        """

        for expense_type in cls:
            if expense_type.value == display_name:
                return expense_type
        return None


@dataclass(frozen=True)
class DailyEntry:
    """One driver's recorded income for one day.

    Attributes:
        id: Record identifier.
        entry_date: Local business date of the entry.
        driver_name: Driver display name at recording time.
        vehicle: Vehicle display name at recording time.
        uber_earnings: Uber channel earnings.
        yango_earnings: Yango channel earnings.
        private_jobs_earnings: Private jobs earnings.
        notes: Free-form notes.
        photo_urls: Remote URLs of attached photos.
        driver_id: Optional driver reference identifier.
        vehicle_id: Optional car reference identifier.
    """

    id: str
    entry_date: date
    driver_name: str
    vehicle: str
    uber_earnings: Decimal = Decimal("0")
    yango_earnings: Decimal = Decimal("0")
    private_jobs_earnings: Decimal = Decimal("0")
    notes: str = ""
    photo_urls: tuple[str, ...] = field(default_factory=tuple)
    driver_id: str = ""
    vehicle_id: str = ""

    @property
    def total_earnings(self) -> Decimal:
        """Return income across all earning channels."""
        return self.uber_earnings + self.yango_earnings + self.private_jobs_earnings

    def is_valid(self) -> bool:
        """Return whether the entry satisfies record invariants."""
        return (
            bool(self.id.strip())
            and bool(self.driver_name.strip())
            and bool(self.vehicle.strip())
            and self.uber_earnings >= 0
            and self.yango_earnings >= 0
            and self.private_jobs_earnings >= 0
        )


@dataclass(frozen=True)
class Expense:
    """One expense booked against a driver and vehicle.

    Attributes:
        id: Record identifier.
        expense_type: Expense category.
        amount: Positive expense amount.
        expense_date: Local business date of the expense.
        driver_name: Driver display name at recording time.
        vehicle: Vehicle display name at recording time.
        notes: Free-form notes.
        photo_urls: Remote URLs of attached receipts.
        driver_id: Optional driver reference identifier.
    """

    id: str
    expense_type: ExpenseType
    amount: Decimal
    expense_date: date
    driver_name: str
    vehicle: str
    notes: str = ""
    photo_urls: tuple[str, ...] = field(default_factory=tuple)
    driver_id: str = ""

    def validation_errors(self) -> list[str]:
        """Return human-readable validation failures, empty when valid."""

        errors: list[str] = []
        if not self.id.strip():
            errors.append("ID cannot be blank")
        if self.amount <= 0:
            errors.append("Amount must be greater than zero")
        if self.amount > _EXPENSE_MAX_AMOUNT:
            errors.append("Amount is too large")
        if not self.driver_name.strip():
            errors.append("Driver name cannot be blank")
        if not self.vehicle.strip():
            errors.append("Vehicle cannot be blank")
        if len(self.notes) > _EXPENSE_MAX_NOTES_LENGTH:
            errors.append(f"Notes too long (max {_EXPENSE_MAX_NOTES_LENGTH} characters)")
        return errors

    def is_valid(self) -> bool:
        """Return whether the expense has no validation failures."""
        return not self.validation_errors()


@dataclass(frozen=True)
class Car:
    """Car reference entity owned by one fleet user.

    Attributes:
        id: Car identifier.
        user_id: Owning user identifier.
        nickname: Optional short name.
        make: Manufacturer.
        model: Model name.
        year: Optional model year.
        license_plate: Registration plate.
        color: Body colour.
        is_active: Whether the car is in service.
        installment: Monthly financing installment.
        annual_insurance_amount: Yearly insurance premium.
    """

    id: str
    user_id: str = ""
    nickname: str = ""
    make: str = ""
    model: str = ""
    year: int | None = None
    license_plate: str = ""
    color: str = ""
    is_active: bool = True
    installment: Decimal = Decimal("0")
    annual_insurance_amount: Decimal = Decimal("0")

    @property
    def display_name(self) -> str:
        """Build the display label, e.g. `Falcon · Toyota Camry`."""

        make_model = " ".join(part for part in (self.make.strip(), self.model.strip()) if part)
        nickname = self.nickname.strip()
        if nickname and make_model:
            return f"{nickname} · {make_model}"
        return nickname or make_model or "Unnamed Car"


@dataclass(frozen=True)
class Driver:
    """Driver reference entity with fixed-cost attributes.

    Attributes:
        id: Driver identifier.
        name: Display name.
        salary: Monthly salary.
        annual_visa_cost: Yearly visa cost.
        annual_license_cost: Yearly license cost.
        is_active: Whether the driver is currently employed.
    """

    id: str
    name: str
    salary: Decimal = Decimal("0")
    annual_visa_cost: Decimal = Decimal("0")
    annual_license_cost: Decimal = Decimal("0")
    is_active: bool = True

    @property
    def monthly_fixed_cost(self) -> Decimal:
        """Return salary plus one month of visa and license costs."""
        return self.salary + (self.annual_visa_cost / Decimal("12")) + (self.annual_license_cost / Decimal("12"))


__all__ = ["Car", "DailyEntry", "Driver", "Expense", "ExpenseType"]
