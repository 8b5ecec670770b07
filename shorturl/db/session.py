"""Session management for database operations.

This module provides utilities for handling SQLAlchemy async sessions
with per-request lifecycle management and transaction support.
It includes dependency injection patterns for FastAPI.
"""

from typing import AsyncGenerator, Callable, Optional, Tuple, Type, TypeVar
import logging
import inspect
from functools import wraps

from fastapi import Request
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import SQLAlchemyError

from shorturl.db.base import Database

logger = logging.getLogger(__name__)

# Return type of the decorated coroutine
T = TypeVar("T")


def get_database(request: Request) -> Database:
    """FastAPI dependency returning the store client created by the app factory."""
    return request.app.state.database


async def get_db(request: Request) -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions.

    Each request gets its own session from the application's Database.
    The session is closed when the request finishes, and rolled back
    if the handler raised.

    Yields:
        AsyncSession: A SQLAlchemy async session object.
    """
    async with get_database(request).session() as session:
        try:
            yield session
        except SQLAlchemyError:
            logger.exception("Database error occurred")
            await session.rollback()
            raise
        except Exception:
            await session.rollback()
            raise


def _find_session_param(func: Callable, db_param_name: Optional[str]) -> Tuple[Optional[str], Optional[int]]:
    """Name and position of the session parameter, by name or by annotation."""
    for position, (name, param) in enumerate(inspect.signature(func).parameters.items()):
        if db_param_name is not None:
            if name == db_param_name:
                return name, position
        elif param.annotation is AsyncSession:
            return name, position
    return None, None


def db_transaction(
    db_param_name: Optional[str] = None,
    commit_error: Optional[Type[Exception]] = None,
    commit_message: str = "Could not commit transaction",
) -> Callable:
    """Decorator to run a service method as one database transaction.

    Commits when the method returns and rolls back when it raises. The
    session argument is found by ``db_param_name`` when given, otherwise
    by its AsyncSession annotation.

    Args:
        db_param_name: Name of the session parameter
        commit_error: Exception raised, with the store error chained, when
            the commit itself fails. The store error propagates unchanged
            when omitted.
        commit_message: Message passed to ``commit_error``

    Example:
        ```python
        @db_transaction(db_param_name="db", commit_error=URLPersistenceError)
        async def rename(self, db: AsyncSession, code: str) -> bool:
            ...
        ```

    Raises:
        ValueError: If the call carries no session
    """
    def decorator(func: Callable[..., T]) -> Callable[..., T]:
        param_key, param_pos = _find_session_param(func, db_param_name)
        if param_key is None:
            logger.warning(f"No session parameter on '{func.__qualname__}'; looking it up per call")

        @wraps(func)
        async def wrapper(*args, **kwargs):
            if param_key is not None and param_key in kwargs:
                db = kwargs[param_key]
            elif param_pos is not None and len(args) > param_pos:
                db = args[param_pos]
            else:
                db = next(
                    (value for value in (*args, *kwargs.values()) if isinstance(value, AsyncSession)),
                    None,
                )

            if db is None:
                raise ValueError(f"'{func.__qualname__}' was called without an AsyncSession")

            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                await db.rollback()
                logger.debug(f"Rolled back '{func.__qualname__}': {e!r}")
                raise

            try:
                await db.commit()
            except SQLAlchemyError as e:
                await db.rollback()
                logger.error(f"Commit failed in '{func.__qualname__}': {e}")
                if commit_error is None:
                    raise
                raise commit_error(commit_message) from e
            return result

        return wrapper
    return decorator
