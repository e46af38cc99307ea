"""Typed interfaces for analytics-layer aggregations."""

from typing import Protocol

from .cost_metrics import ComprehensiveAnalyticsMetrics, CostSelection
from .filters import TimeFilter
from .models import AnalyticsData


class AnalyticsPort(Protocol):
    """Port definition for fleet analytics aggregation services."""

    def analytics_build(self, time_filter: TimeFilter, driver_id: str | None = None) -> AnalyticsData:
        """Compute every analytics facet for one period and driver scope.

        Args:
            time_filter: Selected period.
            driver_id: Optional driver scope.

        Returns:
            AnalyticsData: View state; read failures are carried in `error`.

        Raises:
            RuntimeError: Read failures are reported in the result.
        """

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
            driver_id: Optional driver scope.
            cost_selection: Enabled cost factors.

        Returns:
            ComprehensiveAnalyticsMetrics: Month summary.

        Raises:
            ValueError: Raised when target_month is outside 1..12.
            RuntimeError: Raised when the database read fails.
        """
