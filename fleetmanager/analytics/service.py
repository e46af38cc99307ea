"""Analytics aggregation service over persisted fleet records."""

from __future__ import annotations

import calendar
import logging
from collections.abc import Callable
from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo

from fleetmanager.db.interfaces import CarRepositoryPort, FleetRecordRepositoryPort
from fleetmanager.domain import DailyEntry

from .calculator import (
    ANALYTICS_DEFAULT_ANOMALY_THRESHOLD_RATIO,
    analytics_calculate_day_of_week_analysis,
    analytics_calculate_driver_performance,
    analytics_calculate_expense_breakdown,
    analytics_calculate_monthly_comparison,
    analytics_calculate_projection,
    analytics_calculate_trend_data,
    analytics_calculate_vehicle_roi,
    analytics_detect_anomalies,
    analytics_resolve_comparison_date,
    analytics_sum_income,
)
from .cost_metrics import ComprehensiveAnalyticsMetrics, CostSelection, analytics_calculate_comprehensive_metrics
from .filters import TimeFilter, filter_by_driver, filter_by_time_range, filter_exclude_today, filter_shift_months
from .models import AnalyticsData, MonthlyComparison, ProjectionData

logger = logging.getLogger(__name__)


def analytics_resolve_today(timezone_name: str) -> date:
    """Return the current local business date in one IANA timezone.

    Args:
        timezone_name: IANA timezone name such as `Asia/Dubai`.

    Returns:
        date: Local current date.

    Raises:
        ValueError: Raised when the timezone name is unknown.
    """

    try:
        timezone = ZoneInfo(timezone_name)
    except (KeyError, ValueError) as error:
        raise ValueError(f"unknown timezone_name={timezone_name}") from error
    return datetime.now(timezone).date()


class FleetAnalyticsService:
    """Build analytics view state for one fleet owner."""

    def __init__(  # pylint: disable=too-many-arguments
        self,
        record_repository: FleetRecordRepositoryPort,
        car_repository: CarRepositoryPort,
        owner_id: str,
        today_provider: Callable[[], date],
        anomaly_threshold_ratio: Decimal = ANALYTICS_DEFAULT_ANOMALY_THRESHOLD_RATIO,
    ) -> None:
        """Initialize service dependencies.

        Args:
            record_repository: Source of entries, expenses and drivers.
            car_repository: Source of cars for cost metrics.
            owner_id: Fleet owner whose records are analysed.
            today_provider: Callable returning the local current date.
            anomaly_threshold_ratio: Relative deviation that flags an anomaly.

        Returns:
            None: Initializer does not return a value.

        Raises:
            ValueError: Raised when owner_id is blank or the ratio is outside (0, 1).
        """

        if not owner_id.strip():
            raise ValueError("owner_id must not be blank")
        if not Decimal("0") < anomaly_threshold_ratio < Decimal("1"):
            raise ValueError("anomaly_threshold_ratio must be between 0 and 1")
        self._record_repository = record_repository
        self._car_repository = car_repository
        self._owner_id = owner_id
        self._today_provider = today_provider
        self._anomaly_threshold_ratio = anomaly_threshold_ratio

    def analytics_build(self, time_filter: TimeFilter, driver_id: str | None = None) -> AnalyticsData:
        """Compute every analytics facet for one period and driver scope.

        Records dated today or later are ignored. Read failures are reported in
        the returned state rather than raised.

        Args:
            time_filter: Selected period.
            driver_id: Optional driver scope; unknown ids select all drivers.

        Returns:
            AnalyticsData: Populated view state, empty when no record matches.

        Raises:
            RuntimeError: This service reports read failures in the result.
        """

        today = self._today_provider()
        try:
            entries = self._record_repository.db_daily_entry_list(self._owner_id)
            expenses = self._record_repository.db_expense_list(self._owner_id)
            drivers = self._record_repository.db_driver_list(self._owner_id)
        except (RuntimeError, ConnectionError) as error:
            logger.error("analytics read failed owner_id=%s error=%s", self._owner_id, error)
            return AnalyticsData(is_loading=False, error=str(error))

        entries, expenses = filter_exclude_today(entries, expenses, today)
        entries, expenses, applied_driver_id = filter_by_driver(entries, expenses, drivers, driver_id)
        filtered = filter_by_time_range(entries, expenses, time_filter, today)
        if not filtered.entries and not filtered.expenses:
            logger.info(
                "analytics empty owner_id=%s time_filter=%s driver_id=%s",
                self._owner_id,
                time_filter.value,
                applied_driver_id,
            )
            return AnalyticsData()

        logger.info(
            "analytics build owner_id=%s time_filter=%s driver_id=%s entries=%d expenses=%d",
            self._owner_id,
            time_filter.value,
            applied_driver_id,
            len(filtered.entries),
            len(filtered.expenses),
        )
        monthly_comparison = _analytics_build_monthly_comparison(entries, today)
        return AnalyticsData(
            trend_data=tuple(
                analytics_calculate_trend_data(
                    filtered.entries,
                    filtered.expenses,
                    filtered.start_date,
                    filtered.end_date,
                )
            ),
            driver_performance=tuple(analytics_calculate_driver_performance(filtered.entries)),
            vehicle_roi=tuple(analytics_calculate_vehicle_roi(filtered.entries, filtered.expenses)),
            day_of_week_analysis=tuple(analytics_calculate_day_of_week_analysis(filtered.entries)),
            expense_breakdown=tuple(analytics_calculate_expense_breakdown(filtered.expenses)),
            anomalies=tuple(
                analytics_detect_anomalies(filtered.entries, filtered.expenses, self._anomaly_threshold_ratio)
            ),
            monthly_comparison=monthly_comparison,
            projection=_analytics_build_projection(entries, today),
        )

    def analytics_build_comprehensive_metrics(
        self,
        target_year: int,
        target_month: int,
        driver_id: str | None = None,
        cost_selection: CostSelection | None = None,
    ) -> ComprehensiveAnalyticsMetrics:
        """Compute income and cost metrics for one month.

        Args:
            target_year: Metrics year.
            target_month: Metrics month.
            driver_id: Optional driver scope; unknown ids select all drivers.
            cost_selection: Enabled cost factors, all by default.

        Returns:
            ComprehensiveAnalyticsMetrics: Month summary.

        Raises:
            ValueError: Raised when target_month is outside 1..12.
            RuntimeError: Raised when the database read fails.
        """

        today = self._today_provider()
        entries = self._record_repository.db_daily_entry_list(self._owner_id)
        expenses = self._record_repository.db_expense_list(self._owner_id)
        drivers = self._record_repository.db_driver_list(self._owner_id)
        cars = self._car_repository.db_car_list()

        entries, expenses = filter_exclude_today(entries, expenses, today)
        entries, expenses, applied_driver_id = filter_by_driver(entries, expenses, drivers, driver_id)
        logger.info(
            "cost metrics build owner_id=%s year=%d month=%d driver_id=%s",
            self._owner_id,
            target_year,
            target_month,
            applied_driver_id,
        )
        return analytics_calculate_comprehensive_metrics(
            entries=entries,
            expenses=expenses,
            drivers=drivers,
            cars=cars,
            target_year=target_year,
            target_month=target_month,
            selected_driver_id=applied_driver_id,
            cost_selection=cost_selection,
        )


def _analytics_build_monthly_comparison(entries: list[DailyEntry], today: date) -> MonthlyComparison | None:
    """Compare this month to date with the previous month up to the same day."""

    yesterday = today - timedelta(days=1)
    current_month_start = yesterday.replace(day=1)
    previous_month_start = filter_shift_months(current_month_start, -1)
    previous_month_cutoff = analytics_resolve_comparison_date(
        yesterday,
        previous_month_start.year,
        previous_month_start.month,
    )

    current_month_entries = [entry for entry in entries if current_month_start <= entry.entry_date <= yesterday]
    previous_month_entries = [
        entry for entry in entries if previous_month_start <= entry.entry_date <= previous_month_cutoff
    ]
    if not previous_month_entries:
        return None
    return analytics_calculate_monthly_comparison(
        current_month_entries,
        previous_month_entries,
        calendar.month_name[current_month_start.month].upper(),
        calendar.month_name[previous_month_start.month].upper(),
    )


def _analytics_build_projection(entries: list[DailyEntry], today: date) -> ProjectionData | None:
    """Project the month of yesterday against the full previous month."""

    yesterday = today - timedelta(days=1)
    current_month_start = yesterday.replace(day=1)
    previous_month_start = filter_shift_months(current_month_start, -1)
    current_month_entries = [entry for entry in entries if current_month_start <= entry.entry_date <= yesterday]
    if not current_month_entries:
        return None
    previous_month_entries = [
        entry for entry in entries if previous_month_start <= entry.entry_date < current_month_start
    ]
    previous_month_total = analytics_sum_income(previous_month_entries) if previous_month_entries else None
    return analytics_calculate_projection(current_month_entries, yesterday, previous_month_total)


__all__ = ["FleetAnalyticsService", "analytics_resolve_today"]
