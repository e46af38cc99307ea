"""Application bootstrap wiring for startup validation and dependency assembly."""

from decimal import Decimal

from fastapi import FastAPI

from fleetmanager.adapters import FirebaseStorageAdapter
from fleetmanager.analytics import FleetAnalyticsService, analytics_resolve_today
from fleetmanager.api import create_api_application
from fleetmanager.config import AppSettings, config_load_settings
from fleetmanager.db import (
    SQLAlchemyCarRepository,
    SQLAlchemyDatabaseHealthService,
    SQLAlchemyFleetRecordRepository,
    db_create_engine,
)


def bootstrap_create_application(settings: AppSettings | None = None) -> FastAPI:
    """Assemble the runtime application after validating startup configuration.

    Args:
        settings: Optional preloaded settings; loaded from the environment when omitted.

    Returns:
        FastAPI: Fully initialized FastAPI application instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = db_create_engine(database_url=resolved_settings.database_url)
    car_repository = SQLAlchemyCarRepository(engine=engine, owner_id=resolved_settings.owner_id)
    return create_api_application(
        settings=resolved_settings,
        db_health_service=SQLAlchemyDatabaseHealthService(engine=engine),
        analytics_service=_bootstrap_build_analytics_service(resolved_settings, engine, car_repository),
        car_repository=car_repository,
    )


def bootstrap_create_analytics_service(settings: AppSettings | None = None) -> FleetAnalyticsService:
    """Build the analytics service for non-HTTP report surfaces.

    Args:
        settings: Optional preloaded settings; loaded from the environment when omitted.

    Returns:
        FleetAnalyticsService: Fully wired analytics service instance.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
    """

    resolved_settings = settings or config_load_settings()
    engine = db_create_engine(database_url=resolved_settings.database_url)
    car_repository = SQLAlchemyCarRepository(engine=engine, owner_id=resolved_settings.owner_id)
    return _bootstrap_build_analytics_service(resolved_settings, engine, car_repository)


def bootstrap_create_storage_adapter(settings: AppSettings | None = None) -> FirebaseStorageAdapter:
    """Build the photo storage adapter from storage settings.

    Args:
        settings: Optional preloaded settings; loaded from the environment when omitted.

    Returns:
        FirebaseStorageAdapter: Configured storage adapter.

    Raises:
        SettingsLoadError: Raised when startup configuration validation fails.
        ValueError: Raised when the storage bucket is not configured.
    """

    resolved_settings = settings or config_load_settings()
    return FirebaseStorageAdapter(
        bucket=resolved_settings.storage_bucket,
        user_id=resolved_settings.storage_user_id,
        token=resolved_settings.storage_token,
        base_url=resolved_settings.storage_base_url,
        request_timeout_seconds=resolved_settings.storage_timeout_seconds,
    )


def _bootstrap_build_analytics_service(
    settings: AppSettings,
    engine,
    car_repository: SQLAlchemyCarRepository,
) -> FleetAnalyticsService:
    report_timezone = settings.report_timezone
    return FleetAnalyticsService(
        record_repository=SQLAlchemyFleetRecordRepository(engine=engine),
        car_repository=car_repository,
        owner_id=settings.owner_id,
        today_provider=lambda: analytics_resolve_today(report_timezone),
        anomaly_threshold_ratio=Decimal(str(settings.anomaly_threshold_ratio)),
    )
