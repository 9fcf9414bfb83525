"""Database engine, session factory and the FastAPI session dependency."""

from __future__ import annotations

from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.engine.url import URL
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from clinic_insights.config import Settings, get_settings

Base = declarative_base()


def build_engine_kwargs(settings: Settings) -> dict[str, Any]:
    """Engine options per backend: pool sizing and statement timeout for PostgreSQL, thread sharing for SQLite."""
    url: URL = settings.database_url_obj
    if url.get_backend_name() == "sqlite":
        kwargs: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
        if url.database in (None, "", ":memory:"):
            # An in-memory database exists only on its one connection
            kwargs["poolclass"] = StaticPool
        return kwargs

    kwargs = {
        "pool_size": settings.database_pool_size,
        "max_overflow": settings.database_max_overflow,
        "pool_pre_ping": True,
    }
    if (
        url.get_backend_name() == "postgresql"
        and settings.database_statement_timeout_ms > 0
    ):
        kwargs["connect_args"] = {
            "options": f"-c statement_timeout={settings.database_statement_timeout_ms}"
        }
    return kwargs


_settings = get_settings()
engine = create_engine(_settings.database_url, **build_engine_kwargs(_settings))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Iterator[Session]:
    """Yield a session for the duration of one request."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
