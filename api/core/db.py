"""
Async database access helpers (raw SQL) using asyncpg.

`Database` owns the connection pool. FastAPI opens it on startup, keeps it on
`app.state.database`, and closes it on shutdown (see `api/main.py`). Handlers
receive it through `Depends(get_database)` so tests can swap in a double.

SQL parameter style:
- asyncpg uses positional placeholders: $1, $2, $3, ...
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Any, Iterator

import asyncpg
from fastapi import Request

from . import settings
from .errors import StoreError

logger = logging.getLogger(__name__)

_DRIVER_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError)


def _record_to_dict(record: asyncpg.Record) -> dict[str, Any]:
    return dict(record)


def _first_line(sql: str) -> str:
    for line in sql.splitlines():
        if line.strip():
            return line.strip()
    return ""


def affected_rows(status: str) -> int:
    """
    Parse the row count out of an asyncpg command status such as `DELETE 3`.
    """
    try:
        return int(status.rsplit(" ", 1)[-1])
    except (AttributeError, ValueError):
        return 0


@contextmanager
def _translate_errors(sql: str) -> Iterator[None]:
    try:
        yield
    except _DRIVER_ERRORS as exc:
        logger.error("db_statement_failed sql=%r error=%s", _first_line(sql), exc)
        raise StoreError("Database error") from exc


class Database:
    def __init__(self, pool: asyncpg.Pool):
        self._pool = pool

    @classmethod
    async def connect(
        cls,
        dsn: str | None = None,
        *,
        min_size: int | None = None,
        max_size: int | None = None,
        command_timeout: int | None = None,
    ) -> "Database":
        pool = await asyncpg.create_pool(
            dsn=dsn or settings.database_url(),
            min_size=min_size or settings.db_pool_min_size(),
            max_size=max_size or settings.db_pool_max_size(),
            command_timeout=command_timeout or settings.db_command_timeout(),
        )
        logger.info("db_pool_opened")
        return cls(pool)

    async def close(self) -> None:
        await self._pool.close()
        logger.info("db_pool_closed")

    async def fetch_one(self, sql: str, *args: Any) -> dict[str, Any] | None:
        """
        Run a query and return a single row as a dict (or None).
        """
        with _translate_errors(sql):
            row = await self._pool.fetchrow(sql, *args)
        return _record_to_dict(row) if row is not None else None

    async def fetch_all(self, sql: str, *args: Any) -> list[dict[str, Any]]:
        """
        Run a query and return all rows as a list of dicts.
        """
        with _translate_errors(sql):
            rows = await self._pool.fetch(sql, *args)
        return [_record_to_dict(r) for r in rows]

    async def fetch_value(self, sql: str, *args: Any) -> Any:
        with _translate_errors(sql):
            return await self._pool.fetchval(sql, *args)

    async def execute(self, sql: str, *args: Any) -> str:
        """
        Run a statement (INSERT/UPDATE/DELETE/DDL) and return its command
        status, e.g. `UPDATE 1`.
        """
        with _translate_errors(sql):
            return await self._pool.execute(sql, *args)

    async def ping(self) -> None:
        await self.fetch_value("SELECT 1")


def get_database(request: Request) -> Database:
    database = getattr(request.app.state, "database", None)
    if database is None:
        raise RuntimeError("Database is not initialized. It is opened in the app lifespan.")
    return database
