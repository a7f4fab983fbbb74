"""
Database query utilities with retry logic
"""
import asyncio
import logging
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

logger = logging.getLogger(__name__)


def _classify(error: Exception):
    error_str = str(error).lower()
    error_type = type(error).__name__

    is_pool_error = (
        "maxclientsinsessionmode" in error_str or
        "max clients reached" in error_str or
        "connection pool" in error_str
    )
    is_connection_error = (
        "connection" in error_str and (
            "closed" in error_str or
            "lost" in error_str or
            "reset" in error_str
        )
    )
    is_timeout = (
        error_type == "TimeoutError" or
        "timeout" in error_str or
        "CancelledError" in error_type
    )
    return is_pool_error, is_connection_error, is_timeout


async def execute_with_retry(
    session: AsyncSession,
    query: Any,
    max_retries: int = 3,
    initial_delay: float = 0.5
) -> Any:
    """
    Execute query with retry logic for transient database errors

    Args:
        session: Database session
        query: SQLAlchemy query object
        max_retries: Maximum number of retry attempts
        initial_delay: Initial delay between retries (exponential backoff)

    Returns:
        Query result

    Raises:
        The last database error once retries are exhausted, or immediately
        for non-transient errors (syntax errors, constraint violations, ...)
    """
    for attempt in range(max_retries):
        try:
            return await session.execute(query)
        except Exception as e:
            is_pool_error, is_connection_error, is_timeout = _classify(e)
            logger.warning(
                "Database error on attempt %s/%s: %s: %s",
                attempt + 1, max_retries, type(e).__name__, str(e)[:200],
            )

            if not (is_pool_error or is_connection_error or is_timeout):
                raise

            if attempt == max_retries - 1:
                logger.error("Max retries reached, failing with: %s", type(e).__name__)
                raise

            # Exponential backoff: 0.5s, 1s, 2s; doubled for timeouts
            delay = initial_delay * (2 ** attempt)
            if is_timeout and not (is_pool_error or is_connection_error):
                delay *= 2
            logger.info("Retrying after %ss...", delay)
            await asyncio.sleep(delay)

    raise RuntimeError("execute_with_retry called with max_retries < 1")
