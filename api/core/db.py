"""
Async database access helpers (raw SQL) using asyncpg.

The application lifespan (see `api/main.py`) creates one pool per process and
keeps it on `app.state.pool`. Everything below takes the pool explicitly;
routes get it through the `get_pool` dependency.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
import os
from typing import Any, Awaitable, Callable, TypeVar
from urllib.parse import parse_qsl, quote, urlencode, urlsplit, urlunsplit

import asyncpg
from fastapi import Request

from . import settings

T = TypeVar("T")

UnitOfWork = Callable[[asyncpg.Connection], Awaitable[T]]

logger = logging.getLogger(__name__)


def _sanitize_database_url(url: str) -> str:
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _url_from_parts() -> str:
    name = os.environ.get("DB_NAME", "").strip()
    if not name:
        raise RuntimeError("DATABASE_URL or DB_NAME must be set.")

    host = os.environ.get("DB_HOST", "").strip() or "localhost"
    port = os.environ.get("DB_PORT", "").strip() or "5432"
    user = os.environ.get("DB_USER", "").strip()
    password = os.environ.get("DB_PASSWORD", "")

    auth = ""
    if user:
        auth = quote(user, safe="")
        if password:
            auth += ":" + quote(password, safe="")
        auth += "@"
    return f"postgresql://{auth}{host}:{port}/{quote(name, safe='')}"


def database_url() -> str:
    url = os.environ.get("DATABASE_URL", "").strip()
    if not url:
        url = _url_from_parts()
    return _sanitize_database_url(url)


async def create_pool() -> asyncpg.Pool:
    return await asyncpg.create_pool(
        dsn=database_url(),
        min_size=settings.db_pool_min_size(),
        max_size=settings.db_pool_max_size(),
        command_timeout=settings.db_command_timeout_s(),
    )


async def close_pool(pool: asyncpg.Pool | None) -> None:
    if pool is None:
        return None
    await pool.close()


def get_pool(request: Request) -> asyncpg.Pool:
    """
    FastAPI dependency: the pool created by the lifespan handler.
    """
    pool = getattr(request.app.state, "pool", None)
    if pool is None:
        raise RuntimeError("DB pool is not initialized. Is the lifespan handler running?")
    return pool


def record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def rows_affected(status: str) -> int:
    """
    Parse the row count out of an asyncpg command status tag.

    `conn.execute` returns e.g. "UPDATE 1", "DELETE 0", "INSERT 0 1".
    """
    parts = (status or "").split()
    if not parts:
        return 0
    try:
        return int(parts[-1])
    except ValueError:
        return 0


async def run_in_transaction(pool: asyncpg.Pool, work: UnitOfWork[T]) -> T:
    """
    Run `work(conn)` inside exactly one transaction.

    Commits when `work` returns and hands back its result. Any exception
    raised by `work` (cancellation included) rolls the transaction back and
    propagates unchanged. Uses the database default isolation level.
    """
    async with pool.acquire() as conn:  # type: asyncpg.Connection
        async with conn.transaction():
            return await work(conn)
