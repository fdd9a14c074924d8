"""
Table definitions, applied idempotently on startup.
"""

from __future__ import annotations

import logging

from .db import Database

logger = logging.getLogger(__name__)

STATEMENTS: tuple[str, ...] = (
    """
    CREATE TABLE IF NOT EXISTS layouts (
        id BIGSERIAL PRIMARY KEY,
        name TEXT NOT NULL UNIQUE,
        data TEXT NOT NULL
    )
    """,
    # guest_name NULL means the seat is explicitly unassigned.
    """
    CREATE TABLE IF NOT EXISTS seat_assignments (
        id BIGSERIAL PRIMARY KEY,
        layout_id BIGINT NOT NULL REFERENCES layouts (id) ON DELETE CASCADE,
        seat_id TEXT NOT NULL,
        guest_name TEXT,
        UNIQUE (layout_id, seat_id)
    )
    """,
    """
    CREATE TABLE IF NOT EXISTS guests (
        id TEXT PRIMARY KEY,
        guest_token TEXT NOT NULL UNIQUE,
        name TEXT NOT NULL,
        menu TEXT,
        appetiser TEXT,
        allergies TEXT,
        steak_cook TEXT
    )
    """,
    """
    CREATE UNIQUE INDEX IF NOT EXISTS guests_name_lower_key
    ON guests (lower(name))
    """,
)


async def ensure_schema(database: Database) -> None:
    for statement in STATEMENTS:
        await database.execute(statement)
    logger.info("schema_ready tables=layouts,seat_assignments,guests")
