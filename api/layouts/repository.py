"""
Layout and seat-assignment persistence (raw SQL).
"""

from __future__ import annotations

import asyncpg

from core.db import Database, affected_rows
from core.errors import StoreError


async def list_layout_names(database: Database) -> list[str]:
    rows = await database.fetch_all(
        """
        SELECT name
        FROM layouts
        ORDER BY id ASC
        """
    )
    return [str(row["name"]) for row in rows]


async def get_layout_by_name(database: Database, name: str) -> dict | None:
    return await database.fetch_one(
        """
        SELECT id, name, data
        FROM layouts
        WHERE name = $1
        """,
        name,
    )


async def upsert_layout(database: Database, *, name: str, data: str) -> dict:
    """
    Insert a layout or overwrite the payload of the one with the same name.

    `inserted` is true when a new row was created (`xmax = 0` only holds for
    rows written by the INSERT branch).
    """
    row = await database.fetch_one(
        """
        INSERT INTO layouts (name, data)
        VALUES ($1, $2)
        ON CONFLICT (name) DO UPDATE
        SET data = EXCLUDED.data
        RETURNING id, name, (xmax = 0) AS inserted
        """,
        name,
        data,
    )
    if row is None:
        raise RuntimeError("Failed to upsert layout.")
    return row


async def list_assignments(database: Database, layout_id: int) -> list[dict]:
    return await database.fetch_all(
        """
        SELECT seat_id, guest_name
        FROM seat_assignments
        WHERE layout_id = $1
        """,
        layout_id,
    )


async def upsert_assignment(
    database: Database,
    *,
    layout_id: int,
    seat_id: str,
    guest_name: str | None,
) -> dict | None:
    """
    Insert or overwrite the guest for one seat.

    Returns None when the layout row is gone (deleted after the caller looked
    it up).
    """
    try:
        row = await database.fetch_one(
            """
            INSERT INTO seat_assignments (layout_id, seat_id, guest_name)
            VALUES ($1, $2, $3)
            ON CONFLICT (layout_id, seat_id) DO UPDATE
            SET guest_name = EXCLUDED.guest_name
            RETURNING seat_id, guest_name
            """,
            layout_id,
            seat_id,
            guest_name,
        )
    except StoreError as exc:
        if isinstance(exc.__cause__, asyncpg.ForeignKeyViolationError):
            return None
        raise
    if row is None:
        raise RuntimeError("Failed to upsert seat assignment.")
    return row


async def delete_assignments(database: Database, layout_id: int) -> int:
    status = await database.execute(
        """
        DELETE FROM seat_assignments
        WHERE layout_id = $1
        """,
        layout_id,
    )
    return affected_rows(status)


async def delete_layout(database: Database, layout_id: int) -> bool:
    status = await database.execute(
        """
        DELETE FROM layouts
        WHERE id = $1
        """,
        layout_id,
    )
    return affected_rows(status) > 0
