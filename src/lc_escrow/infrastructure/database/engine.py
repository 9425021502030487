"""Database engine and session management.

Provides:
    - _get_engine: The SQLAlchemy engine (lazy singleton).
    - get_session_factory: A sessionmaker bound to the engine.
    - init_db / close_db: Lifecycle hooks for FastAPI's lifespan.

The ledger itself never opens sessions; SqlLedgerStore does, one per
ledger operation.
"""

from __future__ import annotations

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from lc_escrow.config import get_settings
from lc_escrow.logging_config import get_logger

logger = get_logger(__name__)

# Module-level singletons (initialized lazily)
_engine: Engine | None = None
_session_factory: sessionmaker[Session] | None = None


def _get_engine() -> Engine:
    """Get or create the engine (lazy singleton)."""
    global _engine
    if _engine is None:
        settings = get_settings()
        connect_args = {"check_same_thread": False} if settings.is_sqlite else {}
        _engine = create_engine(
            settings.database_url,
            pool_pre_ping=True,
            echo=settings.db_echo_sql,
            connect_args=connect_args,
        )
        logger.info("database.engine_created", url=_engine.url.render_as_string(hide_password=True))
    return _engine


def get_session_factory() -> sessionmaker[Session]:
    """Get or create the session factory (lazy singleton)."""
    global _session_factory
    if _session_factory is None:
        _session_factory = sessionmaker(
            bind=_get_engine(),
            expire_on_commit=False,
            autoflush=False,
        )
    return _session_factory


def init_db() -> None:
    """Create tables if they don't exist.

    Called during FastAPI's lifespan startup when the SQL backend is active.
    """
    from lc_escrow.infrastructure.database.orm_models import Base

    engine = _get_engine()
    Base.metadata.create_all(engine)
    logger.info("database.tables_created")


def close_db() -> None:
    """Dispose of the engine. Called during FastAPI's lifespan shutdown."""
    global _engine, _session_factory
    if _engine is not None:
        _engine.dispose()
        logger.info("database.engine_disposed")
        _engine = None
        _session_factory = None
