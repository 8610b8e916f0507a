# /app/app/db/base.py

from __future__ import annotations

import contextlib
import logging
from typing import AsyncGenerator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    async_sessionmaker,
    AsyncSession,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from app.config import settings

log = logging.getLogger(__name__)


class Base(DeclarativeBase):
    pass


# --- Engine & Session factory ---
if settings.DATABASE_URL.startswith("sqlite+aiosqlite://"):
    log.info("Using SQLite database (aiosqlite): %s", settings.DATABASE_URL)
    # NullPool: every session opens its own connection on the running loop
    engine = create_async_engine(settings.DATABASE_URL, poolclass=NullPool, future=True)
elif settings.DATABASE_URL.startswith("postgresql+asyncpg://"):
    log.info("Using ASYNC PostgreSQL database")
    engine = create_async_engine(
        settings.DATABASE_URL, echo=(settings.ENVIRONMENT == "dev"), pool_pre_ping=True, future=True
    )
else:
    raise ValueError("DATABASE_URL must use the 'asyncpg' or 'aiosqlite' driver for async operations.")

async_session_factory = async_sessionmaker(
    bind=engine, class_=AsyncSession, expire_on_commit=False
)


async def get_async_db_session() -> AsyncGenerator[AsyncSession, None]:
    """
    FastAPI dependency: creates and yields an async session, handling commit/rollback.
    """
    session = async_session_factory()
    log.debug("get_async_db_session: session %s created", id(session))
    try:
        yield session
        await session.commit()
        log.debug("get_async_db_session: session %s committed", id(session))
    except SQLAlchemyError:
        log.exception("get_async_db_session: SQLAlchemyError in session %s, rolling back", id(session))
        await session.rollback()
        raise
    except Exception:
        log.exception("get_async_db_session: non-DB exception in session %s scope, rolling back", id(session))
        await session.rollback()
        raise
    finally:
        await session.close()


@contextlib.asynccontextmanager
async def async_session_context() -> AsyncGenerator[AsyncSession, None]:
    session: AsyncSession = async_session_factory()
    log.debug("Entering async session context %s", id(session))
    try:
        yield session
        await session.commit()
    except Exception:
        log.exception("Rolling back session %s from context due to exception", id(session))
        await session.rollback()
        raise
    finally:
        await session.close()


async def create_db_and_tables() -> None:
    """Create all tables registered on ``Base.metadata`` (tests, local runs)."""
    import app.core.pets.models  # noqa: F401
    import app.core.care_events.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_db_and_tables() -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


__all__ = [
    "Base", "engine", "async_session_factory", "AsyncSession",
    "get_async_db_session", "async_session_context",
    "create_db_and_tables", "drop_db_and_tables",
]
