# ecogest/core/database.py
"""Database connection and session management using SQLAlchemy."""
from typing import AsyncGenerator
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, create_async_engine, async_sessionmaker
from sqlalchemy import text
import logging

from .config import settings

logger = logging.getLogger(__name__)


def build_engine(database_url: str, background: bool = False) -> AsyncEngine:
    """Create an async engine, with pool tuning only where the driver pools connections"""
    if not database_url.startswith("postgresql"):
        return create_async_engine(database_url, echo=False)

    return create_async_engine(
        database_url,
        pool_size=8 if background else 15,
        max_overflow=12 if background else 25,
        pool_timeout=120 if background else 60,
        pool_recycle=3600 if background else 1800,
        pool_pre_ping=True,
        echo=(settings.environment == 'development' and not background),
        connect_args={
            "command_timeout": 600 if background else 300,
            "server_settings": {
                "jit": "off",
                "application_name": "ecogest_background" if background else "ecogest_api",
                "statement_timeout": "600s" if background else "300s",
                "idle_in_transaction_session_timeout": "120s" if background else "60s",
            }
        }
    )


engine = build_engine(settings.database_url)

# Separate engine for background tasks to avoid pool contention
background_engine = build_engine(settings.database_url, background=True)

AsyncSessionLocal = async_sessionmaker(
    engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)

AsyncBackgroundSessionLocal = async_sessionmaker(
    background_engine,
    expire_on_commit=False,
    class_=AsyncSession,
    autoflush=False,
)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """Get database session for API requests with proper error handling"""
    async with AsyncSessionLocal() as session:
        try:
            yield session
        except Exception as e:
            logger.error(f"Database session error: {e}")
            await session.rollback()
            raise
        finally:
            await session.close()


async def health_check_db(target: AsyncEngine = None) -> bool:
    """Fast health check"""
    try:
        async with (target or engine).connect() as conn:
            await conn.execute(text("SELECT 1"))
            return True
    except Exception as e:
        logger.error(f"Database health check failed: {e}")
        return False


async def close_db_connections():
    """Properly close all database connections"""
    await engine.dispose()
    await background_engine.dispose()
    logger.info("Database connections closed")
