from contextlib import contextmanager

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from bjjlib.config import settings
from bjjlib.logger import db_logger


def _unicode_lower(value):
    return None if value is None else str(value).lower()


def _configure_sqlite(engine: Engine) -> None:
    """
    Make pysqlite transactional in the way the services expect.

    pysqlite's own BEGIN handling is disabled so that reads run inside a real
    transaction (one snapshot per request) and SAVEPOINTs work for the
    tag find-or-create path. Foreign keys must be switched on per connection
    for ON DELETE CASCADE / SET NULL to fire. SQLite's built-in lower() only
    folds ASCII, so it is replaced with one that folds like str.lower().
    """

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.execute("PRAGMA journal_mode=WAL")
        cursor.execute("PRAGMA busy_timeout=5000")
        cursor.close()
        dbapi_connection.create_function(
            "lower", 1, _unicode_lower, deterministic=True
        )

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")


def create_db_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    Args:
        database_url: SQLAlchemy database URL (SQLite or PostgreSQL)

    Returns:
        Configured engine
    """
    if database_url.startswith("sqlite"):
        kwargs = {"connect_args": {"check_same_thread": False}, "echo": settings.debug}
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            kwargs["poolclass"] = StaticPool
        engine = create_engine(database_url, **kwargs)
        _configure_sqlite(engine)
        return engine

    if settings.is_production:
        # Production - smaller pool, recycle to avoid stale connections
        return create_engine(
            database_url,
            pool_pre_ping=True,
            pool_size=5,
            max_overflow=10,
            pool_timeout=30,
            pool_recycle=1800,
            echo=False,
        )

    # Local development - Larger pool
    return create_engine(
        database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        echo=settings.debug,
    )


engine = create_db_engine(settings.database_url)

# Create session factory
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Base class for models
Base = declarative_base()


def get_db():
    """Dependency for getting database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@contextmanager
def snapshot_read(db: Session):
    """
    Run a group of reads against one point-in-time view of the store.

    On PostgreSQL the transaction is opened at REPEATABLE READ so that every
    statement sees the same snapshot. SQLite transactions are already
    snapshot-consistent. The transaction stays open until the session is
    closed, so lazily loaded attributes come from the same snapshot.
    """
    if db.get_bind().dialect.name == "postgresql" and not db.in_transaction():
        db.connection(execution_options={"isolation_level": "REPEATABLE READ"})
    yield db


def init_db(bind: Engine | None = None) -> None:
    """Create all tables that don't exist yet."""
    import bjjlib.models  # noqa: F401  (register models on Base.metadata)

    Base.metadata.create_all(bind=bind or engine)
    db_logger.info("Database schema ensured")
