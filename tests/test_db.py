"""
Unit tests for the asyncpg wrapper and environment settings.
"""

from unittest.mock import AsyncMock, MagicMock

import asyncpg
import pytest

from core import settings
from core.db import Database, affected_rows
from core.errors import StoreError


@pytest.fixture
def pool():
    mock_pool = MagicMock()
    mock_pool.fetchrow = AsyncMock()
    mock_pool.fetch = AsyncMock()
    mock_pool.fetchval = AsyncMock()
    mock_pool.execute = AsyncMock()
    mock_pool.close = AsyncMock()
    return mock_pool


@pytest.mark.asyncio
async def test_rows_come_back_as_dicts(pool):
    pool.fetchrow.return_value = {"id": 1, "name": "Wedding"}
    pool.fetch.return_value = [{"name": "Wedding"}, {"name": "Gala"}]
    database = Database(pool)

    row = await database.fetch_one("SELECT id, name FROM layouts WHERE name = $1", "Wedding")
    rows = await database.fetch_all("SELECT name FROM layouts")

    assert row == {"id": 1, "name": "Wedding"}
    assert rows == [{"name": "Wedding"}, {"name": "Gala"}]
    pool.fetchrow.assert_awaited_once_with("SELECT id, name FROM layouts WHERE name = $1", "Wedding")


@pytest.mark.asyncio
async def test_missing_row_is_none(pool):
    pool.fetchrow.return_value = None

    assert await Database(pool).fetch_one("SELECT 1 WHERE false") is None


@pytest.mark.asyncio
async def test_driver_errors_become_store_errors(pool):
    cause = asyncpg.PostgresError("relation \"layouts\" does not exist")
    pool.execute.side_effect = cause

    with pytest.raises(StoreError) as exc_info:
        await Database(pool).execute("DELETE FROM layouts WHERE id = $1", 1)

    assert exc_info.value.message == "Database error"
    assert exc_info.value.status_code == 500
    assert exc_info.value.__cause__ is cause


@pytest.mark.asyncio
async def test_ping_surfaces_connection_failures(pool):
    pool.fetchval.side_effect = ConnectionRefusedError("connection refused")

    with pytest.raises(StoreError) as exc_info:
        await Database(pool).ping()

    assert str(exc_info.value.__cause__) == "connection refused"


@pytest.mark.parametrize("status, expected", [("DELETE 3", 3), ("UPDATE 0", 0), ("INSERT 0 1", 1), ("", 0), (None, 0)])
def test_affected_rows(status, expected):
    assert affected_rows(status) == expected


def test_database_url_drops_sslmode(monkeypatch):
    monkeypatch.setenv("DATABASE_URL", "postgresql://u:p@db:5432/seating?sslmode=require&application_name=api")

    assert settings.database_url() == "postgresql://u:p@db:5432/seating?application_name=api"


def test_database_url_is_required(monkeypatch):
    monkeypatch.delenv("DATABASE_URL", raising=False)

    with pytest.raises(RuntimeError):
        settings.database_url()


def test_cors_origins_from_env(monkeypatch):
    monkeypatch.setenv("CORS_ALLOW_ORIGINS", "https://plan.example.com, http://localhost:3000,")

    assert settings.cors_allow_origins() == ["https://plan.example.com", "http://localhost:3000"]


def test_pool_sizes_fall_back_on_bad_values(monkeypatch):
    monkeypatch.setenv("DB_POOL_MIN_SIZE", "zero")
    monkeypatch.setenv("DB_POOL_MAX_SIZE", "")

    assert settings.db_pool_min_size() == 1
    assert settings.db_pool_max_size() == 5
