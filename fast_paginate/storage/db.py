from typing import AsyncIterator

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel.ext.asyncio.session import AsyncSession

from fast_paginate.logging import logger
from fast_paginate.settings import Settings, app_settings
from fast_paginate.utils.query_monitor import enable_query_monitoring


def create_engine_from_settings(settings: Settings = app_settings) -> AsyncEngine:
    """
    Create an async engine for the configured database.

    SQLite URLs get a single shared connection (an in-memory database only
    lives as long as its connection); other backends get a sized pool.

    Args:
        settings: Settings to read the URL and pool options from.

    Returns:
        AsyncEngine with query monitoring enabled.
    """
    if settings.is_sqlite:
        new_engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
    else:
        new_engine = create_async_engine(
            settings.DATABASE_URL,
            echo=settings.DB_ECHO,
            pool_size=settings.DB_POOL_SIZE,
            max_overflow=settings.DB_MAX_OVERFLOW,
            pool_recycle=settings.DB_POOL_RECYCLE,
            pool_pre_ping=settings.DB_POOL_PRE_PING,
        )

    # Enable database query performance monitoring
    enable_query_monitoring(new_engine)
    return new_engine


engine: AsyncEngine = create_engine_from_settings()
async_session = sessionmaker(
    engine, expire_on_commit=False, class_=AsyncSession
)


async def get_session() -> AsyncIterator[AsyncSession]:
    """
    Get an asynchronous session from the SQLAlchemy session factory.

    Yields:
        AsyncSession: An asynchronous SQLAlchemy session.
    """
    async with async_session() as session:
        try:
            yield session
            await session.commit()
        except IntegrityError as ex:
            await session.rollback()
            logger.error(f"Database integrity error: {ex}")
            raise
        except SQLAlchemyError as ex:
            await session.rollback()
            logger.error(f"Database error: {ex}")
            raise
