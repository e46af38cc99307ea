"""Analytics layer package for fleet income and cost aggregation."""

from .cost_metrics import (
    ComprehensiveAnalyticsMetrics,
    CostFactor,
    CostSelection,
    analytics_calculate_comprehensive_metrics,
)
from .filters import FilteredData, TimeFilter
from .interfaces import AnalyticsPort
from .models import (
    AnalyticsData,
    AnomalyData,
    AnomalyType,
    DayOfWeekAnalysis,
    DriverPerformance,
    ExpenseBreakdown,
    IncomeLevel,
    MonthlyComparison,
    ProjectionData,
    TrendData,
    VehicleROI,
)
from .presentation import presentation_serialize_analytics, presentation_serialize_metrics
from .service import FleetAnalyticsService, analytics_resolve_today

__all__ = [
    "AnalyticsData",
    "AnalyticsPort",
    "AnomalyData",
    "AnomalyType",
    "ComprehensiveAnalyticsMetrics",
    "CostFactor",
    "CostSelection",
    "DayOfWeekAnalysis",
    "DriverPerformance",
    "ExpenseBreakdown",
    "FilteredData",
    "FleetAnalyticsService",
    "IncomeLevel",
    "MonthlyComparison",
    "ProjectionData",
    "TimeFilter",
    "TrendData",
    "VehicleROI",
    "analytics_calculate_comprehensive_metrics",
    "analytics_resolve_today",
    "presentation_serialize_analytics",
    "presentation_serialize_metrics",
]
