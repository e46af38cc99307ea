"""Database layer package for all SQL and persistence boundaries."""

from .cars import CarSubscription, SQLAlchemyCarRepository
from .health import SQLAlchemyDatabaseHealthService
from .interfaces import (
    CarListener,
    CarRepositoryPort,
    CarSubscriptionPort,
    DatabaseHealthPort,
    FleetRecordRepositoryPort,
)
from .records import SQLAlchemyFleetRecordRepository
from .engine import db_create_engine
from .errors import RecordOwnershipConflictError

__all__ = [
    "CarListener",
    "CarRepositoryPort",
    "CarSubscription",
    "CarSubscriptionPort",
    "DatabaseHealthPort",
    "FleetRecordRepositoryPort",
    "RecordOwnershipConflictError",
    "SQLAlchemyCarRepository",
    "SQLAlchemyDatabaseHealthService",
    "SQLAlchemyFleetRecordRepository",
    "db_create_engine",
]
