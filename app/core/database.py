"""
Database dependency for FastAPI and the guard every store operation runs under
"""

import asyncio
import logging
from typing import Awaitable, TypeVar

from sqlalchemy.exc import InterfaceError, OperationalError

from database.config import SessionLocal, engine, get_db
from app.core.config import settings
from app.core.errors import StoreTimeoutError, StoreUnavailableError

logger = logging.getLogger(__name__)

T = TypeVar("T")


async def guarded(operation: str, coro: Awaitable[T]) -> T:
    """
    Run a store coroutine with the configured timeout.

    Timeouts surface as StoreTimeoutError and lost connections as
    StoreUnavailableError; nothing is turned into an empty result.
    Work that did not reach its commit is rolled back when the
    request's session closes.
    """
    try:
        return await asyncio.wait_for(coro, timeout=settings.STORE_TIMEOUT_SECONDS)
    except asyncio.TimeoutError:
        logger.warning("Store operation %s timed out after %ss", operation, settings.STORE_TIMEOUT_SECONDS)
        raise StoreTimeoutError(
            f"Store operation '{operation}' timed out",
            details={"operation": operation, "timeout_seconds": settings.STORE_TIMEOUT_SECONDS}
        )
    except (OperationalError, InterfaceError) as e:
        logger.error("Store unavailable during %s: %s", operation, e)
        raise StoreUnavailableError(
            "The data store is currently unavailable",
            details={"operation": operation}
        )


__all__ = ["SessionLocal", "engine", "get_db", "guarded"]
