"""
Database connection management
"""
import logging
from typing import AsyncIterator, Optional

from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine, AsyncSession
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import NullPool

from gym_backend.config import settings
from gym_backend.errors import ServiceUnavailableError
from gym_backend.utils.url_builder import build_async_url, is_sqlite_url, normalize_database_url

logger = logging.getLogger(__name__)

# Global database objects
engine: Optional[AsyncEngine] = None
async_session: Optional[sessionmaker] = None


def _create_engine(database_url: str) -> AsyncEngine:
    async_database_url = build_async_url(database_url)

    if is_sqlite_url(database_url):
        # One connection per session; aiosqlite connections are bound to a thread
        return create_async_engine(async_database_url, poolclass=NullPool, echo=False)

    ssl_required = (
        "sslmode=require" in database_url.lower() or
        settings.SUPABASE_SSLMODE == "require"
    )

    connect_args = {
        "server_settings": {
            "application_name": "gym_backend",
            "tcp_keepalives_idle": "600",
            "tcp_keepalives_interval": "30",
            "tcp_keepalives_count": "3",
        },
        "command_timeout": 60,
        "timeout": 20,
    }

    if ssl_required:
        connect_args["ssl"] = True

    return create_async_engine(
        async_database_url,
        pool_pre_ping=True,
        pool_size=10,
        max_overflow=20,
        pool_recycle=3600,
        pool_timeout=30,
        connect_args=connect_args,
        echo=False,
        pool_reset_on_return="commit",
    )


def init_database(database_url: Optional[str] = None) -> bool:
    """
    Initialize database connection

    Args:
        database_url: Overrides settings.DATABASE_URL when given

    Returns:
        True if initialization successful, False otherwise
    """
    global engine, async_session

    database_url = database_url or settings.DATABASE_URL
    if not database_url:
        logger.warning("DATABASE_URL not set, database features will be unavailable")
        return False

    try:
        engine = _create_engine(normalize_database_url(database_url))
        async_session = sessionmaker(
            bind=engine,
            expire_on_commit=False,
            class_=AsyncSession
        )
        logger.info("Database engine initialized successfully")
        return True

    except Exception:
        logger.exception("Failed to initialize database engine")
        engine = None
        async_session = None
        return False


async def dispose_database() -> None:
    """Dispose the engine and forget the session maker"""
    global engine, async_session

    if engine is not None:
        await engine.dispose()
    engine = None
    async_session = None


def get_engine() -> Optional[AsyncEngine]:
    return engine


def get_session() -> Optional[sessionmaker]:
    """
    Get database session maker

    Returns:
        Session maker or None if not initialized
    """
    return async_session


def is_initialized() -> bool:
    """
    Check if database is initialized

    Returns:
        True if initialized, False otherwise
    """
    return engine is not None and async_session is not None


async def get_db_session() -> AsyncIterator[AsyncSession]:
    """FastAPI dependency: one session per request"""
    session_maker = get_session()
    if not is_initialized() or session_maker is None:
        raise ServiceUnavailableError("Database not configured")

    async with session_maker() as session:
        yield session
