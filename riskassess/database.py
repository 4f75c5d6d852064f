"""
Risk Assessment Platform – Async SQLAlchemy engine, session, and declarative base.

Projects and jokes live in a managed Postgres endpoint in production
(``postgresql+asyncpg://...``) and in a local SQLite file otherwise.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.orm import DeclarativeBase

from riskassess.config import settings


def build_engine(url: str, echo: bool = False, **kwargs) -> AsyncEngine:
    """Create an async engine for *url*; extra kwargs go to create_async_engine."""
    engine_kwargs = {
        "echo": echo,
        "future": True,
        **kwargs,
    }

    # Neon / Supabase poolers run pgbouncer in transaction mode, which
    # breaks asyncpg's prepared statement cache.
    if "postgresql" in url:
        engine_kwargs["connect_args"] = {"statement_cache_size": 0}

    return create_async_engine(url, **engine_kwargs)


# ── Engine (process lifetime) ──
engine = build_engine(settings.DATABASE_URL, echo=settings.DEBUG)

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


async def create_tables(bind: AsyncEngine = engine) -> None:
    """Create the ``jokes`` and ``projects`` tables if they are missing."""
    import riskassess.models  # noqa: F401  (registers the mappers)

    async with bind.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# ── Dependency for FastAPI routes ──
async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield a request-scoped async session, auto-closed on exit."""
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
