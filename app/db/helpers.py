# app/db/helpers.py
"""
Database helper functions for common patterns.
Reduces boilerplate in the repository layer.

Every psycopg failure leaves these helpers as a DatabaseError. Connection-level
failures (server unreachable, pool exhausted or not open) are raised as the
DataUnavailableError subclass so callers can answer with a 503. Nothing here
retries; retries belong to the transport layer.
"""

from typing import Any

import psycopg
from psycopg_pool import PoolTimeout

from app.db.pool import get_db_connection, get_db_transaction
from app.infrastructure.observability.logging import get_logger

logger = get_logger(__name__)


class DatabaseError(Exception):
    """Custom exception for database operations."""

    def __init__(self, message: str, operation: str = "unknown", recoverable: bool = True):
        super().__init__(message)
        self.operation = operation
        self.recoverable = recoverable


class DataUnavailableError(DatabaseError):
    """The database could not be reached at all."""


def _wrap_error(error: Exception, operation: str, query: str) -> DatabaseError:
    if isinstance(error, (psycopg.OperationalError, PoolTimeout, RuntimeError)):
        logger.error(
            "Database unavailable", operation=operation, query=query[:100], error=str(error)
        )
        return DataUnavailableError(
            f"Database unavailable: {error}", operation=operation, recoverable=True
        )

    logger.error(f"Database {operation} error", query=query[:100], error=str(error))
    return DatabaseError(f"Query failed: {error}", operation=operation, recoverable=False)


async def fetch_one(
    query: str, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> dict[str, Any] | None:
    """
    Execute query and return single row as dict.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Dict with row data or None if no results
    """
    try:
        if connection:
            async with connection.cursor() as cur:
                await cur.execute(query, params)
                row = await cur.fetchone()
                return row if row else None
        else:
            async with await get_db_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    row = await cur.fetchone()
                    return row if row else None

    except (psycopg.Error, PoolTimeout, RuntimeError) as e:
        raise _wrap_error(e, "fetch_one", query) from e


async def fetch_all(
    query: str, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> list[dict[str, Any]]:
    """
    Execute query and return all rows as list of dicts.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        List of dicts with row data
    """
    try:
        if connection:
            async with connection.cursor() as cur:
                await cur.execute(query, params)
                return await cur.fetchall()
        else:
            async with await get_db_connection() as conn:
                async with conn.cursor() as cur:
                    await cur.execute(query, params)
                    return await cur.fetchall()

    except (psycopg.Error, PoolTimeout, RuntimeError) as e:
        raise _wrap_error(e, "fetch_all", query) from e


async def execute_query(
    query: str, params: tuple = (), *, connection: psycopg.AsyncConnection | None = None
) -> int:
    """
    Execute query and return number of affected rows.

    Args:
        query: SQL query with %s placeholders
        params: Query parameters
        connection: Optional existing connection

    Returns:
        Number of affected rows
    """
    try:
        if connection:
            cursor = await connection.execute(query, params)
            return cursor.rowcount
        else:
            async with await get_db_transaction() as conn:
                cursor = await conn.execute(query, params)
                return cursor.rowcount

    except (psycopg.Error, PoolTimeout, RuntimeError) as e:
        raise _wrap_error(e, "execute", query) from e
