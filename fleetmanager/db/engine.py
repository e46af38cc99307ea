"""Database engine construction for PostgreSQL and SQLite targets."""

from sqlalchemy import Engine, create_engine
from sqlalchemy.engine import make_url


def db_create_engine(database_url: str) -> Engine:
    """Create the SQLAlchemy engine for application database access.

    SQLite engines allow cross-thread connection use because FastAPI runs
    synchronous handlers in a worker thread pool.

    Args:
        database_url: SQLAlchemy database URL.

    Returns:
        Engine: Configured SQLAlchemy engine.

    Raises:
        ValueError: Raised when the database URL is blank.
        ArgumentError: Raised when the database URL cannot be parsed.
    """

    normalized_database_url = database_url.strip()
    if not normalized_database_url:
        raise ValueError("database_url must not be blank")

    parsed_url = make_url(normalized_database_url)
    if parsed_url.get_backend_name() == "sqlite":
        return create_engine(parsed_url, connect_args={"check_same_thread": False})
    return create_engine(parsed_url, pool_pre_ping=True)


__all__ = ["db_create_engine"]
