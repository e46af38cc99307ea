"""Tests for analytics API endpoints over a stubbed analytics service."""

from __future__ import annotations

from datetime import date
from decimal import Decimal

from fastapi import FastAPI
from fastapi.testclient import TestClient

from fleetmanager.analytics import (
    AnalyticsData,
    ComprehensiveAnalyticsMetrics,
    CostFactor,
    CostSelection,
    TimeFilter,
    TrendData,
)
from fleetmanager.api.routers import api_create_analytics_router


class _AnalyticsServiceStub:
    """Analytics service double recording received arguments."""

    def __init__(self, analytics_data: AnalyticsData | None = None):
        self.analytics_data = analytics_data or AnalyticsData()
        self.build_calls: list[tuple[TimeFilter, str | None]] = []
        self.metrics_calls: list[tuple[int, int, str | None, CostSelection | None]] = []

    def analytics_build(self, time_filter: TimeFilter, driver_id: str | None = None) -> AnalyticsData:
        """Record arguments and return configured analytics.

        Returns:
            AnalyticsData: Configured analytics state.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.build_calls.append((time_filter, driver_id))
        return self.analytics_data

    def analytics_build_comprehensive_metrics(
        self,
        target_year: int,
        target_month: int,
        driver_id: str | None = None,
        cost_selection: CostSelection | None = None,
    ) -> ComprehensiveAnalyticsMetrics:
        """Record arguments and return fixed metrics.

        Returns:
            ComprehensiveAnalyticsMetrics: Fixed metrics payload.

        Raises:
            RuntimeError: This stub does not raise runtime errors.
        """

        self.metrics_calls.append((target_year, target_month, driver_id, cost_selection))
        return ComprehensiveAnalyticsMetrics(
            total_income=Decimal("800"),
            total_expenses=Decimal("8100"),
            net_operational_profit=Decimal("-7300"),
            vehicle_cost_ratio=Decimal("3.5"),
            has_data=True,
        )


def _build_client(analytics_service: _AnalyticsServiceStub) -> TestClient:
    """Create a test client with only the analytics router mounted."""

    application = FastAPI()
    application.include_router(
        api_create_analytics_router(
            analytics_service,
            high_income_threshold=Decimal("500"),
            medium_income_threshold=Decimal("200"),
        )
    )
    return TestClient(application)


def test_api_analytics_returns_serialized_view_state() -> None:
    """Return facets for the requested period and driver scope.

    Returns:
        None: Assertions validate response payload and forwarded arguments.

    Raises:
        AssertionError: Raised when payload or arguments deviate.
    """

    analytics_service = _AnalyticsServiceStub(
        AnalyticsData(
            trend_data=(
                TrendData(
                    date=date(2026, 10, 1),
                    income=Decimal("250"),
                    expenses=Decimal("20"),
                    net_profit=Decimal("230"),
                ),
            )
        )
    )

    response = _build_client(analytics_service).get(
        "/analytics",
        params={"time_filter": " this_month ", "driver_id": " d1 "},
    )

    assert response.status_code == 200
    assert response.json()["time_filter"] == "THIS_MONTH"
    assert response.json()["trend_data"] == [
        {"date": "2026-10-01", "income": "250.00", "expenses": "20.00", "net_profit": "230.00", "income_level": "MEDIUM"}
    ]
    assert response.json()["monthly_comparison"] is None
    assert analytics_service.build_calls == [(TimeFilter.THIS_MONTH, "d1")]


def test_api_analytics_defaults_to_last_three_months() -> None:
    """Use the three-month period and all drivers by default.

    Returns:
        None: Assertions validate defaults.

    Raises:
        AssertionError: Raised when defaults deviate.
    """

    analytics_service = _AnalyticsServiceStub()

    response = _build_client(analytics_service).get("/analytics", params={"driver_id": "  "})

    assert response.status_code == 200
    assert response.json()["time_filter"] == "LAST_3_MONTHS"
    assert response.json()["trend_data"] == []
    assert analytics_service.build_calls == [(TimeFilter.LAST_3_MONTHS, None)]


def test_api_analytics_carries_read_error_in_payload() -> None:
    """Return the state error instead of failing the request.

    Returns:
        None: Assertions validate error propagation.

    Raises:
        AssertionError: Raised when the error is lost.
    """

    analytics_service = _AnalyticsServiceStub(AnalyticsData(error="failed to list daily entries"))

    response = _build_client(analytics_service).get("/analytics")

    assert response.status_code == 200
    assert response.json()["error"] == "failed to list daily entries"


def test_api_analytics_rejects_unknown_time_filter() -> None:
    """Return error envelope for unsupported periods.

    Returns:
        None: Assertions validate error envelope.

    Raises:
        AssertionError: Raised when invalid periods are accepted.
    """

    analytics_service = _AnalyticsServiceStub()

    response = _build_client(analytics_service).get("/analytics", params={"time_filter": "last_week"})

    assert response.status_code == 400
    assert response.json() == {
        "status": "error",
        "code": "INVALID_TIME_FILTER",
        "message": "unsupported time_filter=LAST_WEEK",
    }
    assert analytics_service.build_calls == []


def test_api_analytics_metrics_forwards_cost_selection() -> None:
    """Disable excluded cost factors and echo them sorted.

    Returns:
        None: Assertions validate payload and forwarded selection.

    Raises:
        AssertionError: Raised when selection or payload deviates.
    """

    analytics_service = _AnalyticsServiceStub()

    response = _build_client(analytics_service).get(
        "/analytics/metrics",
        params=[("year", "2026"), ("month", "10"), ("exclude", "salary"), ("exclude", "INSURANCE")],
    )

    assert response.status_code == 200
    assert response.json()["total_income"] == "800.00"
    assert response.json()["vehicle_cost_ratio"] == "3.5000"
    assert response.json()["net_operational_profit"] == "-7300.00"
    assert response.json()["excluded"] == ["INSURANCE", "SALARY"]
    assert (response.json()["year"], response.json()["month"]) == (2026, 10)

    target_year, target_month, driver_id, cost_selection = analytics_service.metrics_calls[0]
    assert (target_year, target_month, driver_id) == (2026, 10, None)
    assert cost_selection.is_enabled(CostFactor.SALARY) is False
    assert cost_selection.is_enabled(CostFactor.EXPENSES) is True


def test_api_analytics_metrics_validates_query() -> None:
    """Reject unknown cost factors and out-of-range months.

    Returns:
        None: Assertions validate request validation.

    Raises:
        AssertionError: Raised when invalid queries are accepted.
    """

    client = _build_client(_AnalyticsServiceStub())

    unknown_factor_response = client.get("/analytics/metrics", params={"year": 2026, "month": 10, "exclude": "fuel"})
    invalid_month_response = client.get("/analytics/metrics", params={"year": 2026, "month": 13})

    assert unknown_factor_response.status_code == 400
    assert unknown_factor_response.json()["code"] == "INVALID_COST_FACTOR"
    assert invalid_month_response.status_code == 422
