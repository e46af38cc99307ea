"""Main module entrypoint for local runtime execution.

This module validates startup configuration and launches the FastAPI service
or runs one command-line report or photo operation.
"""

import argparse
import json
import logging
from decimal import Decimal
from pathlib import Path

import uvicorn

from fleetmanager.analytics import AnalyticsData, TimeFilter, presentation_serialize_analytics
from fleetmanager.analytics.presentation import format_currency, format_percentage, growth_description
from fleetmanager.bootstrap import (
    bootstrap_create_analytics_service,
    bootstrap_create_application,
    bootstrap_create_storage_adapter,
)
from fleetmanager.config import AppSettings, config_load_settings

logger = logging.getLogger(__name__)


def main() -> None:
    """Run selected runtime command with validated startup configuration.

    Returns:
        None: This function does not return a runtime value.

    Raises:
        SettingsLoadError: Raised when configuration validation fails.
    """

    argument_parser = argparse.ArgumentParser(description="Fleet manager analytics runtime entrypoint")
    argument_parser.add_argument(
        "command",
        nargs="?",
        default="api",
        choices=("api", "analytics-report", "photo-upload", "photo-delete"),
        help="Runtime command: `api` starts server, `analytics-report` prints analytics for one period, "
        "`photo-upload` and `photo-delete` manage record photos",
        type=str,
    )
    argument_parser.add_argument(
        "--time-filter",
        dest="time_filter",
        type=str,
        default=TimeFilter.LAST_3_MONTHS.value,
        choices=[time_filter.value for time_filter in TimeFilter],
        help="Analytics period for `analytics-report`",
    )
    argument_parser.add_argument(
        "--driver-id",
        dest="driver_id",
        type=str,
        help="Optional driver scope for `analytics-report`",
    )
    argument_parser.add_argument(
        "--format",
        dest="output_format",
        type=str,
        default="json",
        choices=("json", "text"),
        help="Output format for `analytics-report`",
    )
    argument_parser.add_argument("--path", dest="local_path", type=Path, help="Local photo path for `photo-upload`")
    argument_parser.add_argument("--file-name", dest="file_name", type=str, help="Object name prefix for `photo-upload`")
    argument_parser.add_argument("--url", dest="photo_url", type=str, help="Photo download URL for `photo-delete`")
    parsed_arguments = argument_parser.parse_args()

    settings = config_load_settings()
    main_configure_logging(settings)

    if parsed_arguments.command == "analytics-report":
        analytics_service = bootstrap_create_analytics_service(settings)
        analytics_data = analytics_service.analytics_build(
            time_filter=TimeFilter(parsed_arguments.time_filter),
            driver_id=parsed_arguments.driver_id,
        )
        if parsed_arguments.output_format == "text":
            print(main_render_analytics_text(analytics_data))
        else:
            payload = presentation_serialize_analytics(
                analytics_data,
                high_income_threshold=Decimal(str(settings.high_income_threshold)),
                medium_income_threshold=Decimal(str(settings.medium_income_threshold)),
            )
            print(json.dumps(payload, indent=2))
        if analytics_data.error is not None:
            raise SystemExit(1)
        return

    if parsed_arguments.command == "photo-upload":
        if parsed_arguments.local_path is None or not parsed_arguments.file_name:
            argument_parser.error("photo-upload requires --path and --file-name")
        storage_result = bootstrap_create_storage_adapter(settings).storage_upload_photo(
            local_path=parsed_arguments.local_path,
            file_name=parsed_arguments.file_name,
        )
        print(json.dumps({"success": storage_result.success, "url": storage_result.url, "error": storage_result.error}))
        if not storage_result.success:
            raise SystemExit(1)
        return

    if parsed_arguments.command == "photo-delete":
        if not parsed_arguments.photo_url:
            argument_parser.error("photo-delete requires --url")
        storage_result = bootstrap_create_storage_adapter(settings).storage_delete_photo(url=parsed_arguments.photo_url)
        print(json.dumps({"success": storage_result.success, "url": storage_result.url, "error": storage_result.error}))
        if not storage_result.success:
            raise SystemExit(1)
        return

    application = bootstrap_create_application(settings)
    logger.info("starting api host=%s port=%d", settings.application_host, settings.application_port)
    uvicorn.run(
        application,
        host=settings.application_host,
        port=settings.application_port,
        log_level=settings.log_level.lower(),
    )


def main_configure_logging(settings: AppSettings) -> None:
    """Configure root logging from settings.

    Args:
        settings: Validated runtime settings.

    Returns:
        None: Configures logging as a side effect.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    logging.basicConfig(
        level=settings.log_level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def main_render_analytics_text(analytics_data: AnalyticsData) -> str:
    """Render a short human-readable analytics summary.

    Args:
        analytics_data: Analytics view state.

    Returns:
        str: Multi-line summary.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    if analytics_data.error is not None:
        return f"Analytics unavailable: {analytics_data.error}"
    if not analytics_data.trend_data:
        return "No analytics data for the selected period."

    total_income = sum((trend.income for trend in analytics_data.trend_data), Decimal("0"))
    total_expenses = sum((trend.expenses for trend in analytics_data.trend_data), Decimal("0"))
    lines = [
        f"Period: {analytics_data.trend_data[0].date.isoformat()} to {analytics_data.trend_data[-1].date.isoformat()}",
        f"Income: {format_currency(total_income)}",
        f"Expenses: {format_currency(total_expenses)}",
        f"Net profit: {format_currency(total_income - total_expenses)}",
    ]
    if analytics_data.driver_performance:
        top_driver = analytics_data.driver_performance[0]
        lines.append(f"Top driver: {top_driver.driver_name} ({format_currency(top_driver.total_revenue)})")
    if analytics_data.monthly_comparison is not None:
        comparison = analytics_data.monthly_comparison
        lines.append(
            f"{comparison.current_month} vs {comparison.previous_month}: "
            f"{format_percentage(comparison.growth_percentage)} ({growth_description(comparison.growth_percentage)})"
        )
    if analytics_data.projection is not None:
        lines.append(f"Projected month total: {format_currency(analytics_data.projection.projected_month_total)}")
    lines.append(f"Anomalies: {len(analytics_data.anomalies)}")
    return "\n".join(lines)


if __name__ == "__main__":
    main()
