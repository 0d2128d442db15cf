# stockops/database.py

from functools import lru_cache
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.ext.asyncio import create_async_engine, async_sessionmaker, AsyncSession, AsyncEngine
from sqlalchemy.orm import declarative_base

from stockops.core.config import Settings

Base = declarative_base()


@lru_cache()
def get_engine(database_url: str) -> AsyncEngine:
    """One engine (and pool) per database URL for the life of the process."""
    if not database_url:
        raise ValueError("DATABASE_URL is not set in environment variables")

    return create_async_engine(
        database_url,
        echo=False,
        future=True,
        pool_size=5,
        max_overflow=10,
        pool_timeout=30,
        pool_recycle=1800,
        pool_pre_ping=True,
    )


def get_sessionmaker(settings: Settings) -> async_sessionmaker:
    return async_sessionmaker(
        get_engine(settings.async_database_url),
        class_=AsyncSession,
        expire_on_commit=False,
    )


@asynccontextmanager
async def get_session(settings: Settings) -> AsyncIterator[AsyncSession]:
    session = get_sessionmaker(settings)()
    try:
        yield session
    finally:
        await session.close()
