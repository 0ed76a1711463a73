"""
Async database access helpers (raw SQL) using asyncpg.

This module owns the connection pool. FastAPI initializes it on startup and
closes it on shutdown (see `api/main.py`).

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...

Driver failures are translated into the app error taxonomy here, so callers
only ever see `ConflictError` (unique constraint), `NotFoundError` (a
referenced row vanished) or `UnavailableError` (pool exhausted / database
unreachable) instead of raw asyncpg exceptions.
"""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .config import env_float, env_int
from .errors import ConflictError, NotFoundError, UnavailableError

logger = logging.getLogger(__name__)

_pool: asyncpg.Pool | None = None

_UNAVAILABLE_ERRORS = (
    asyncio.TimeoutError,
    OSError,
    asyncpg.TooManyConnectionsError,
    asyncpg.CannotConnectNowError,
    asyncpg.ConnectionDoesNotExistError,
)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        raise RuntimeError("DATABASE_URL is not set.")
    return _sanitize_database_url(url)


def acquire_timeout_s() -> float:
    return env_float("DB_ACQUIRE_TIMEOUT_S", 10.0)


async def init_pool() -> None:
    global _pool
    if _pool is not None:
        return None
    _pool = await asyncpg.create_pool(
        dsn=database_url(),
        min_size=env_int("DB_POOL_MIN_SIZE", 1),
        max_size=env_int("DB_POOL_MAX_SIZE", 5),
        command_timeout=env_float("DB_COMMAND_TIMEOUT_S", 30.0),
    )


async def close_pool() -> None:
    global _pool
    if _pool is None:
        return None
    await _pool.close()
    _pool = None


def pool() -> asyncpg.Pool:
    if _pool is None:
        raise RuntimeError("DB pool is not initialized. Call init_pool() on startup.")
    return _pool


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


@asynccontextmanager
async def connection() -> AsyncIterator[asyncpg.Connection]:
    """
    Check out a pooled connection, translating driver failures.

    Pool exhaustion surfaces as `UnavailableError` once the acquire timeout
    elapses; unique-constraint violations surface as `ConflictError` and
    foreign-key violations (the referenced row was deleted concurrently) as
    `NotFoundError`.
    """
    try:
        async with pool().acquire(timeout=acquire_timeout_s()) as conn:
            yield conn
    except asyncpg.UniqueViolationError as exc:
        logger.info("unique_violation constraint=%s", getattr(exc, "constraint_name", None))
        raise ConflictError("Duplicate value violates a uniqueness constraint.") from exc
    except asyncpg.ForeignKeyViolationError as exc:
        logger.info("foreign_key_violation constraint=%s", getattr(exc, "constraint_name", None))
        raise NotFoundError("Referenced record does not exist.") from exc
    except _UNAVAILABLE_ERRORS as exc:
        logger.warning("db_unavailable error=%s", type(exc).__name__)
        raise UnavailableError("Database is temporarily unavailable.") from exc


async def fetch_one(sql: str, *args: Any) -> dict[str, Any] | None:
    """
    Run a query and return a single row as a dict (or None).
    """
    async with connection() as conn:
        row = await conn.fetchrow(sql, *args)
    return _record_to_dict(row) if row is not None else None


async def fetch_all(sql: str, *args: Any) -> list[dict[str, Any]]:
    """
    Run a query and return all rows as a list of dicts.
    """
    async with connection() as conn:
        rows = await conn.fetch(sql, *args)
    return [_record_to_dict(r) for r in rows]


async def execute(sql: str, *args: Any) -> str:
    """
    Run a statement (INSERT/UPDATE/DELETE/DDL). Returns the command status tag.
    """
    async with connection() as conn:
        return await conn.execute(sql, *args)
