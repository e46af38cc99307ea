"""Monthly operating-cost metrics for the fleet or one driver."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import date
from decimal import Decimal
from enum import Enum

from fleetmanager.domain import Car, DailyEntry, Driver, Expense

from .calculator import analytics_sum_income
from .filters import filter_normalize_name, filter_resolve_entry_driver_id

_ZERO = Decimal("0")


class CostFactor(Enum):
    """Cost components that can be toggled in the metrics."""

    SALARY = "SALARY"
    EXPENSES = "EXPENSES"
    INSTALLMENTS = "INSTALLMENTS"
    INSURANCE = "INSURANCE"


@dataclass(frozen=True)
class CostSelection:
    """Enabled cost components; everything is included by default."""

    include_salary: bool = True
    include_operational_expenses: bool = True
    include_vehicle_installments: bool = True
    include_vehicle_insurance: bool = True

    def is_enabled(self, factor: CostFactor) -> bool:
        """Return whether a cost factor is counted."""
        return getattr(self, _COST_SELECTION_FIELDS[factor])

    def with_factor(self, factor: CostFactor, is_enabled: bool) -> CostSelection:
        """Return a copy with one factor toggled."""
        return replace(self, **{_COST_SELECTION_FIELDS[factor]: is_enabled})

    def all_enabled(self) -> bool:
        """Return whether every factor is counted."""
        return all(self.is_enabled(factor) for factor in CostFactor)


_COST_SELECTION_FIELDS = {
    CostFactor.SALARY: "include_salary",
    CostFactor.EXPENSES: "include_operational_expenses",
    CostFactor.INSTALLMENTS: "include_vehicle_installments",
    CostFactor.INSURANCE: "include_vehicle_insurance",
}


@dataclass(frozen=True)
class ComprehensiveAnalyticsMetrics:
    """Income and cost summary for one month.

    Attributes:
        driver_net_income: Net result attributed to the driver scope.
        driver_fixed_costs: Salary, visa and license costs counted.
        vehicle_cost_ratio: Vehicle fixed costs relative to income.
        vehicle_fixed_costs: Installment and insurance costs counted.
        total_income: Income in the month.
        variable_expenses: Operational expenses counted.
        net_operational_profit: Income minus all counted costs.
        driver_name: Driver name when exactly one driver is in scope.
        vehicle_name: Vehicle name when it can be attributed.
        has_data: Whether any entry or expense falls in the month.
        total_expenses: All counted costs.
        driver_vehicle_cost: Counted vehicle costs of the selected driver's car.
    """

    driver_net_income: Decimal = _ZERO
    driver_fixed_costs: Decimal = _ZERO
    vehicle_cost_ratio: Decimal = _ZERO
    vehicle_fixed_costs: Decimal = _ZERO
    total_income: Decimal = _ZERO
    variable_expenses: Decimal = _ZERO
    net_operational_profit: Decimal = _ZERO
    driver_name: str | None = None
    vehicle_name: str | None = None
    has_data: bool = False
    total_expenses: Decimal = _ZERO
    driver_vehicle_cost: Decimal = _ZERO


@dataclass(frozen=True)
class _VehicleMonthlyCost:
    installment: Decimal = _ZERO
    insurance: Decimal = _ZERO

    @property
    def total(self) -> Decimal:
        return self.installment + self.insurance

    def selected_total(self, selection: CostSelection) -> Decimal:
        installment = self.installment if selection.include_vehicle_installments else _ZERO
        insurance = self.insurance if selection.include_vehicle_insurance else _ZERO
        return installment + insurance

    def __add__(self, other: _VehicleMonthlyCost) -> _VehicleMonthlyCost:
        return _VehicleMonthlyCost(
            installment=self.installment + other.installment,
            insurance=self.insurance + other.insurance,
        )


def analytics_calculate_comprehensive_metrics(  # pylint: disable=too-many-locals,too-many-arguments
    entries: list[DailyEntry],
    expenses: list[Expense],
    drivers: list[Driver],
    cars: list[Car],
    target_year: int,
    target_month: int,
    selected_driver_id: str | None = None,
    cost_selection: CostSelection | None = None,
) -> ComprehensiveAnalyticsMetrics:
    """Compute income, fixed costs and net profit for one month.

    Drivers in scope are the selected driver, else active drivers (all drivers
    when none is active). Each driver's vehicle cost comes from the car of
    their latest entry on or before the month end; without any resolvable
    assignment the fleet falls back to the active cars.

    Args:
        entries: Income entries, already scoped to the driver selection.
        expenses: Expense records, already scoped to the driver selection.
        drivers: Known drivers.
        cars: Known cars.
        target_year: Metrics year.
        target_month: Metrics month.
        selected_driver_id: Optional driver scope.
        cost_selection: Enabled cost factors, all by default.

    Returns:
        ComprehensiveAnalyticsMetrics: Month summary.

    Raises:
        ValueError: Raised when target_month is outside 1..12.
    """

    if not 1 <= target_month <= 12:
        raise ValueError("target_month must be between 1 and 12")

    selection = cost_selection or CostSelection()

    if selected_driver_id is not None:
        scoped_drivers = [driver for driver in drivers if driver.id == selected_driver_id]
    else:
        scoped_drivers = [driver for driver in drivers if driver.is_active] or list(drivers)
    driver_ids_in_scope = {driver.id for driver in scoped_drivers}
    driver_ids_by_name = {filter_normalize_name(driver.name): driver.id for driver in drivers}

    def _in_target_month(value: date) -> bool:
        return value.year == target_year and value.month == target_month

    entries_for_month = [
        entry
        for entry in entries
        if _in_target_month(entry.entry_date)
        and (
            not driver_ids_in_scope
            or filter_resolve_entry_driver_id(entry, driver_ids_by_name) in driver_ids_in_scope
        )
    ]
    expenses_for_month = [
        expense
        for expense in expenses
        if _in_target_month(expense.expense_date)
        and (not driver_ids_in_scope or expense.driver_id in driver_ids_in_scope)
    ]

    cars_by_id = {car.id: car for car in cars}
    cars_by_name = {filter_normalize_name(car.display_name): car for car in cars}
    vehicle_costs_by_driver = _analytics_assign_vehicle_costs(
        entries=entries,
        cars_by_id=cars_by_id,
        cars_by_name=cars_by_name,
        driver_ids_by_name=driver_ids_by_name,
        target_year=target_year,
        target_month=target_month,
    )

    relevant_driver_ids = driver_ids_in_scope or set(vehicle_costs_by_driver)
    assigned_vehicle_costs = _VehicleMonthlyCost()
    for driver_id in relevant_driver_ids:
        assigned_vehicle_costs = assigned_vehicle_costs + vehicle_costs_by_driver.get(driver_id, _VehicleMonthlyCost())

    fallback_vehicle_costs = _VehicleMonthlyCost()
    for car in [car for car in cars if car.is_active] or list(cars):
        fallback_vehicle_costs = fallback_vehicle_costs + _analytics_car_monthly_cost(car)

    if selected_driver_id is not None or assigned_vehicle_costs.total > _ZERO:
        aggregated_vehicle_costs = assigned_vehicle_costs
    else:
        aggregated_vehicle_costs = fallback_vehicle_costs

    if selected_driver_id is not None:
        driver_vehicle_costs = vehicle_costs_by_driver.get(selected_driver_id, _VehicleMonthlyCost())
    else:
        driver_vehicle_costs = aggregated_vehicle_costs

    total_income = analytics_sum_income(entries_for_month)
    driver_fixed_costs = (
        sum((driver.monthly_fixed_cost for driver in scoped_drivers), _ZERO) if selection.include_salary else _ZERO
    )
    vehicle_fixed_costs = aggregated_vehicle_costs.selected_total(selection)
    variable_expenses = (
        sum((expense.amount for expense in expenses_for_month), _ZERO)
        if selection.include_operational_expenses
        else _ZERO
    )
    total_expenses = driver_fixed_costs + vehicle_fixed_costs + variable_expenses
    net_operational_profit = total_income - total_expenses
    vehicle_cost_ratio = (
        vehicle_fixed_costs / total_income if total_income > _ZERO and vehicle_fixed_costs > _ZERO else _ZERO
    )

    return ComprehensiveAnalyticsMetrics(
        driver_net_income=net_operational_profit,
        driver_fixed_costs=driver_fixed_costs,
        vehicle_cost_ratio=vehicle_cost_ratio,
        vehicle_fixed_costs=vehicle_fixed_costs,
        total_income=total_income,
        variable_expenses=variable_expenses,
        net_operational_profit=net_operational_profit,
        driver_name=scoped_drivers[0].name if len(scoped_drivers) == 1 else None,
        vehicle_name=_analytics_resolve_vehicle_name(
            entries_for_month=entries_for_month,
            cars=cars,
            cars_by_id=cars_by_id,
            selected_driver_id=selected_driver_id,
        ),
        has_data=bool(entries_for_month or expenses_for_month),
        total_expenses=total_expenses,
        driver_vehicle_cost=driver_vehicle_costs.selected_total(selection),
    )


def _analytics_assign_vehicle_costs(  # pylint: disable=too-many-arguments
    entries: list[DailyEntry],
    cars_by_id: dict[str, Car],
    cars_by_name: dict[str, Car],
    driver_ids_by_name: dict[str, str],
    target_year: int,
    target_month: int,
) -> dict[str, _VehicleMonthlyCost]:
    """Map each driver to the monthly cost of the car they last drove."""

    latest_entry_by_driver: dict[str, DailyEntry] = {}
    for entry in entries:
        if (entry.entry_date.year, entry.entry_date.month) > (target_year, target_month):
            continue
        driver_id = filter_resolve_entry_driver_id(entry, driver_ids_by_name)
        if driver_id is None:
            continue
        latest_entry = latest_entry_by_driver.get(driver_id)
        if latest_entry is None or entry.entry_date >= latest_entry.entry_date:
            latest_entry_by_driver[driver_id] = entry

    vehicle_costs: dict[str, _VehicleMonthlyCost] = {}
    for driver_id, entry in latest_entry_by_driver.items():
        car = cars_by_id.get(entry.vehicle_id) if entry.vehicle_id.strip() else None
        if car is None and entry.vehicle.strip():
            car = cars_by_name.get(filter_normalize_name(entry.vehicle))
        if car is not None:
            vehicle_costs[driver_id] = _analytics_car_monthly_cost(car)
    return vehicle_costs


def _analytics_car_monthly_cost(car: Car) -> _VehicleMonthlyCost:
    return _VehicleMonthlyCost(installment=car.installment, insurance=car.annual_insurance_amount / Decimal("12"))


def _analytics_resolve_vehicle_name(
    entries_for_month: list[DailyEntry],
    cars: list[Car],
    cars_by_id: dict[str, Car],
    selected_driver_id: str | None,
) -> str | None:
    if selected_driver_id is None:
        active_cars = [car for car in cars if car.is_active]
        return active_cars[0].display_name if len(active_cars) == 1 else None

    entry_counts_by_vehicle_id: dict[str, int] = {}
    for entry in entries_for_month:
        entry_counts_by_vehicle_id[entry.vehicle_id] = entry_counts_by_vehicle_id.get(entry.vehicle_id, 0) + 1
    if not entry_counts_by_vehicle_id:
        return None
    most_used_vehicle_id = max(entry_counts_by_vehicle_id, key=entry_counts_by_vehicle_id.__getitem__)
    car = cars_by_id.get(most_used_vehicle_id)
    return None if car is None else car.display_name


__all__ = [
    "ComprehensiveAnalyticsMetrics",
    "CostFactor",
    "CostSelection",
    "analytics_calculate_comprehensive_metrics",
]
