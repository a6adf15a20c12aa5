"""Async engine and session factory for the bookmark store."""
from __future__ import annotations

from collections.abc import AsyncGenerator

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

from ..core.config import settings
from ..models import Bookmark  # noqa: F401 - registers the table on Base.metadata
from ..models.base import Base

connect_args: dict[str, object] = {}
if settings.database_ssl_required:
    connect_args["ssl"] = True

engine = create_async_engine(
    settings.database_async_url,
    echo=settings.log_level.upper() == "DEBUG",
    pool_pre_ping=True,
    connect_args=connect_args,
)
SessionLocal = async_sessionmaker(engine, expire_on_commit=False, class_=AsyncSession)


async def get_session() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency yielding a bookmark-store session."""

    async with SessionLocal() as session:
        yield session


async def create_schema() -> None:
    """Create all tables that do not exist yet."""

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
