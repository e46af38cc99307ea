"""Domain models used across application layer boundaries."""

from .fleet import Car, DailyEntry, Driver, Expense, ExpenseType
from .models import HealthStatus

__all__ = [
    "Car",
    "DailyEntry",
    "Driver",
    "Expense",
    "ExpenseType",
    "HealthStatus",
]
