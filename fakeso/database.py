"""
Fake Stack Overflow – Async SQLAlchemy engine, session, and declarative base.
"""

from __future__ import annotations

from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.pool import NullPool

from fakeso.config import settings

# ── Engine ──
engine_kwargs = {
    "echo": settings.DEBUG,
    "future": True,
}

# If using PostgreSQL (Render/Supabase), disable prepared statement caching
# because PgBouncer (transaction mode) does not support it properly.
if "postgresql" in settings.DATABASE_URL:
    engine_kwargs["connect_args"] = {"statement_cache_size": 0}

# aiosqlite connections are bound to the loop that opened them.
if settings.DATABASE_URL.startswith("sqlite"):
    engine_kwargs["poolclass"] = NullPool

engine = create_async_engine(
    settings.DATABASE_URL,
    **engine_kwargs
)


# SQLite ignores ON DELETE clauses unless foreign keys are switched on per connection.
@event.listens_for(engine.sync_engine, "connect")
def _enable_sqlite_foreign_keys(dbapi_connection, connection_record):
    if engine.dialect.name == "sqlite":
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

# ── Session factory ──
async_session = async_sessionmaker(
    bind=engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


# ── Declarative base ──
class Base(DeclarativeBase):
    """Base class for all ORM models."""
    pass


async def create_tables() -> None:
    """Create every table registered on ``Base``."""
    import fakeso.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


async def drop_tables() -> None:
    import fakeso.models  # noqa: F401

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


# ── Dependency for FastAPI routes ──
async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async database session, auto-closed on exit."""
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def dialect_insert(session: AsyncSession, model):
    """
    ``INSERT`` construct for the session's backend, so callers can use
    ``on_conflict_do_nothing`` / ``on_conflict_do_update``.
    """
    if session.get_bind().dialect.name == "postgresql":
        from sqlalchemy.dialects.postgresql import insert
    else:
        from sqlalchemy.dialects.sqlite import insert
    return insert(model)
