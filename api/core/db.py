"""
Async Postgres access (raw SQL) using asyncpg.

`Database` owns one connection pool. The app lifespan opens it on startup and
closes it on shutdown (see `api/main.py`); request handlers reach it through
the `Store` handle, never through module state.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

import asyncpg

from .errors import DuplicateRecord, StoreError

logger = logging.getLogger(__name__)

# Server-side errors, client-side (argument encoding, lost connection) and socket errors.
DB_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)

SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS users (
    id uuid PRIMARY KEY,
    username text NOT NULL UNIQUE,
    created_at timestamptz NOT NULL DEFAULT now()
);

CREATE TABLE IF NOT EXISTS exercises (
    id uuid PRIMARY KEY,
    user_id uuid NOT NULL,
    description text NOT NULL,
    duration integer NOT NULL CHECK (duration > 0),
    date date NOT NULL,
    created_at timestamptz NOT NULL DEFAULT now()
);

CREATE INDEX IF NOT EXISTS exercises_user_id_date_idx ON exercises (user_id, date);
"""


def sanitize_database_url(url: str) -> str:
    # asyncpg rejects libpq's sslmode in the query string.
    parts = urlsplit(url)
    if not parts.query:
        return url

    params = [(k, v) for (k, v) in parse_qsl(parts.query, keep_blank_values=True) if k != "sslmode"]
    query = urlencode(params)
    return urlunsplit((parts.scheme, parts.netloc, parts.path, query, parts.fragment))


def _store_error(exc: Exception) -> StoreError:
    if isinstance(exc, asyncpg.UniqueViolationError):
        return DuplicateRecord("Record already exists.", details=str(exc))
    return StoreError("Database error.", details=str(exc))


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


class Database:
    def __init__(
        self,
        dsn: str,
        *,
        min_size: int = 1,
        max_size: int = 5,
        command_timeout: float = 30,
    ) -> None:
        self._dsn = sanitize_database_url(dsn)
        self._min_size = min_size
        self._max_size = max_size
        self._command_timeout = command_timeout
        self._pool: asyncpg.Pool | None = None

    async def connect(self) -> None:
        if self._pool is not None:
            return None
        try:
            self._pool = await asyncpg.create_pool(
                dsn=self._dsn,
                min_size=self._min_size,
                max_size=self._max_size,
                command_timeout=self._command_timeout,
            )
        except DB_ERRORS as exc:
            raise _store_error(exc) from exc
        logger.info("db_pool_opened min_size=%s max_size=%s", self._min_size, self._max_size)

    async def close(self) -> None:
        if self._pool is None:
            return None
        await self._pool.close()
        self._pool = None
        logger.info("db_pool_closed")

    @property
    def pool(self) -> asyncpg.Pool:
        if self._pool is None:
            raise RuntimeError("DB pool is not initialized. Call connect() on startup.")
        return self._pool

    async def ensure_schema(self) -> None:
        await self.execute(SCHEMA_SQL)

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        try:
            row = await self.pool.fetchrow(sql, *args)
        except DB_ERRORS as exc:
            raise _store_error(exc) from exc
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        try:
            rows = await self.pool.fetch(sql, *args)
        except DB_ERRORS as exc:
            raise _store_error(exc) from exc
        return [_record_to_dict(r) for r in rows]

    async def execute(self, sql: str, *args: Any) -> None:
        """
        Run a statement (INSERT/UPDATE/DDL). No result returned.
        """
        try:
            await self.pool.execute(sql, *args)
        except DB_ERRORS as exc:
            raise _store_error(exc) from exc
