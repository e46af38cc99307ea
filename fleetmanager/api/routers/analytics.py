"""Analytics API router composition for dashboard and cost metric reads."""

from __future__ import annotations

from decimal import Decimal

from fastapi import APIRouter, Query, status
from fastapi.responses import JSONResponse

from fleetmanager.analytics import (
    AnalyticsPort,
    CostFactor,
    CostSelection,
    TimeFilter,
    presentation_serialize_analytics,
    presentation_serialize_metrics,
)


def api_create_analytics_router(
    analytics_service: AnalyticsPort,
    high_income_threshold: Decimal = Decimal("250"),
    medium_income_threshold: Decimal = Decimal("100"),
) -> APIRouter:
    """Create analytics router exposing view-state and monthly metric reads.

    Args:
        analytics_service: Analytics-layer aggregation service.
        high_income_threshold: Daily income at or above which a trend day is HIGH.
        medium_income_threshold: Daily income at or above which a trend day is MEDIUM.

    Returns:
        APIRouter: Router exposing `/analytics` endpoints.

    Raises:
        ValueError: Raised when analytics_service is invalid.
    """

    if analytics_service is None:
        raise ValueError("analytics_service must not be None")

    router = APIRouter(prefix="/analytics", tags=["analytics"])

    @router.get("")
    def api_analytics_read(
        time_filter: str = Query(default=TimeFilter.LAST_3_MONTHS.value),
        driver_id: str | None = Query(default=None),
    ) -> JSONResponse:
        """Return analytics facets for one period and optional driver.

        Args:
            time_filter: One of ALL_TIME, LAST_3_MONTHS or THIS_MONTH.
            driver_id: Optional driver scope.

        Returns:
            JSONResponse: Serialized analytics view state.

        Raises:
            RuntimeError: Read failures are carried in the payload `error`.
        """

        normalized_time_filter = time_filter.strip().upper()
        try:
            parsed_time_filter = TimeFilter(normalized_time_filter)
        except ValueError:
            return api_error_response(
                code="INVALID_TIME_FILTER",
                message=f"unsupported time_filter={normalized_time_filter}",
            )

        analytics_data = analytics_service.analytics_build(
            time_filter=parsed_time_filter,
            driver_id=_api_normalize_optional_text(driver_id),
        )
        payload = presentation_serialize_analytics(
            analytics_data,
            high_income_threshold=high_income_threshold,
            medium_income_threshold=medium_income_threshold,
        )
        payload["time_filter"] = parsed_time_filter.value
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    @router.get("/metrics")
    def api_analytics_metrics_read(
        year: int = Query(ge=1),
        month: int = Query(ge=1, le=12),
        driver_id: str | None = Query(default=None),
        exclude: list[str] = Query(default=[]),
    ) -> JSONResponse:
        """Return comprehensive income and cost metrics for one month.

        Args:
            year: Metrics year.
            month: Metrics month.
            driver_id: Optional driver scope.
            exclude: Cost factors left out (SALARY, EXPENSES, INSTALLMENTS, INSURANCE).

        Returns:
            JSONResponse: Serialized metrics payload.

        Raises:
            RuntimeError: Raised when repository read fails.
        """

        cost_selection = CostSelection()
        for raw_factor in exclude:
            normalized_factor = raw_factor.strip().upper()
            try:
                cost_selection = cost_selection.with_factor(CostFactor(normalized_factor), False)
            except ValueError:
                return api_error_response(
                    code="INVALID_COST_FACTOR",
                    message=f"unsupported exclude={normalized_factor}",
                )

        metrics = analytics_service.analytics_build_comprehensive_metrics(
            target_year=year,
            target_month=month,
            driver_id=_api_normalize_optional_text(driver_id),
            cost_selection=cost_selection,
        )
        payload = presentation_serialize_metrics(metrics)
        payload["year"] = year
        payload["month"] = month
        payload["excluded"] = sorted(factor.value for factor in CostFactor if not cost_selection.is_enabled(factor))
        return JSONResponse(content=payload, status_code=status.HTTP_200_OK)

    return router


def api_error_response(code: str, message: str, status_code: int = status.HTTP_400_BAD_REQUEST) -> JSONResponse:
    """Build the standard error envelope.

    Args:
        code: Stable machine-readable error code.
        message: Human-readable detail.
        status_code: HTTP status code.

    Returns:
        JSONResponse: Error payload response.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    payload = {"status": "error", "code": code, "message": message}
    return JSONResponse(content=payload, status_code=status_code)


def _api_normalize_optional_text(value: str | None) -> str | None:
    if value is None:
        return None
    normalized_value = value.strip()
    return normalized_value or None


__all__ = ["api_create_analytics_router", "api_error_response"]
