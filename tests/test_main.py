"""Tests for command-line analytics report rendering."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fleetmanager.analytics import AnalyticsData, DriverPerformance, MonthlyComparison, ProjectionData, TrendData
from fleetmanager.main import main_render_analytics_text


def test_main_render_analytics_text_summarizes_facets() -> None:
    """Render totals, top driver, comparison and projection lines.

    Returns:
        None: Assertions validate rendered text.

    Raises:
        AssertionError: Raised when rendered lines deviate.
    """

    analytics_data = AnalyticsData(
        trend_data=(
            TrendData(date=date(2026, 10, 1), income=Decimal("300"), expenses=Decimal("50"), net_profit=Decimal("250")),
            TrendData(date=date(2026, 10, 2), income=Decimal("100"), expenses=Decimal("0"), net_profit=Decimal("100")),
        ),
        driver_performance=(
            DriverPerformance(
                driver_name="Ali",
                total_revenue=Decimal("400"),
                average_revenue_per_day=Decimal("200"),
                active_days=2,
            ),
        ),
        monthly_comparison=MonthlyComparison(
            current_month="OCTOBER",
            current_total=Decimal("400"),
            previous_month="SEPTEMBER",
            previous_total=Decimal("320"),
            growth_percentage=Decimal("25"),
            growth_amount=Decimal("80"),
        ),
        projection=ProjectionData(
            current_month_total=Decimal("400"),
            projected_month_total=Decimal("6200"),
            days_elapsed=2,
            total_days_in_month=31,
            daily_average=Decimal("200"),
            comparison_to_previous=Decimal("0"),
        ),
    )

    rendered_text = main_render_analytics_text(analytics_data)

    assert rendered_text.splitlines() == [
        "Period: 2026-10-01 to 2026-10-02",
        "Income: AED 400.00",
        "Expenses: AED 50.00",
        "Net profit: AED 350.00",
        "Top driver: Ali (AED 400.00)",
        "OCTOBER vs SEPTEMBER: 25.0% (Exceptional growth this month!)",
        "Projected month total: AED 6200.00",
        "Anomalies: 0",
    ]


def test_main_render_analytics_text_handles_error_and_empty_states() -> None:
    """Render one-line messages for failed and empty analytics.

    Returns:
        None: Assertions validate fallback messages.

    Raises:
        AssertionError: Raised when messages deviate.
    """

    assert main_render_analytics_text(AnalyticsData(error="failed to list daily entries")) == (
        "Analytics unavailable: failed to list daily entries"
    )
    assert main_render_analytics_text(AnalyticsData()) == "No analytics data for the selected period."
