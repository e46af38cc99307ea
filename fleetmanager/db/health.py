"""Database health service reporting connectivity and applied schema revision."""

from sqlalchemy import Engine, text
from sqlalchemy.exc import SQLAlchemyError

from fleetmanager.domain import HealthStatus

from .interfaces import DatabaseHealthPort


class SQLAlchemyDatabaseHealthService(DatabaseHealthPort):
    """Fleet database health service backed by SQLAlchemy engine checks."""

    def __init__(self, engine: Engine):
        """Initialize database health service.

        Args:
            engine: SQLAlchemy engine used for connectivity checks.

        Raises:
            ValueError: Raised when engine is None.
        """

        if engine is None:
            raise ValueError("engine must not be None")
        self._engine = engine

    def db_connection_label(self) -> str:
        """Return the target database URL with the password masked."""

        return self._engine.url.render_as_string(hide_password=True)

    def db_check_health(self) -> HealthStatus:
        """Verify connectivity and report which migration revision is applied.

        A reachable database without the Alembic version table reports status
        `unmigrated` so operators can tell an empty schema from an outage.

        Returns:
            HealthStatus: Health payload with status and revision detail.

        Raises:
            ConnectionError: Raised when connectivity check fails.
        """

        try:
            with self._engine.connect() as connection:
                connection.execute(text("SELECT 1"))
                schema_revision = self._db_read_schema_revision(connection)
        except SQLAlchemyError as error:
            raise ConnectionError("database connectivity check failed") from error

        if schema_revision is None:
            return HealthStatus(status="unmigrated", detail="database reachable; schema revision not found")
        return HealthStatus(status="ok", detail=f"database connectivity verified; schema revision {schema_revision}")

    @staticmethod
    def _db_read_schema_revision(connection) -> str | None:
        try:
            return connection.execute(text("SELECT version_num FROM alembic_version")).scalar()
        except SQLAlchemyError:
            return None


__all__ = ["SQLAlchemyDatabaseHealthService"]
