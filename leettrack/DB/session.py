"""Session forge."""

from __future__ import annotations

import logging

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from leettrack.Core.config import get_settings

settings = get_settings()
logger = logging.getLogger("db.session")


def get_database_url() -> str:
    return settings.get_database_url()


runtime_url = get_database_url()
if not runtime_url:
    raise RuntimeError("DATABASE_URL not configured")


def _engine_kwargs() -> dict:
    if settings.is_sqlite:
        # Shared between request handlers and the sync task
        kwargs = {"connect_args": {"check_same_thread": False}}
        if runtime_url in ("sqlite://", "sqlite:///:memory:"):
            # One connection, otherwise every checkout sees an empty database
            kwargs["poolclass"] = StaticPool
        return kwargs
    return {
        "pool_pre_ping": True,
        "pool_size": settings.db_pool_size,
        "max_overflow": settings.db_max_overflow,
        "pool_timeout": settings.db_pool_timeout,
        "pool_recycle": 300,
    }


engine = create_engine(runtime_url, echo=settings.debug, **_engine_kwargs())

SessionLocal = sessionmaker(autocommit=False, autoflush=False, expire_on_commit=False, bind=engine)


def init_db() -> None:
    """Create missing tables (dev / sqlite convenience; prod uses alembic)."""
    import leettrack.DB.models  # noqa: F401
    from leettrack.DB.base import Base

    Base.metadata.create_all(bind=engine)
    logger.info("db.init tables=%d", len(Base.metadata.tables))
