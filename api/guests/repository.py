"""
Guest persistence helpers.
"""

from __future__ import annotations

from core.db import Database, affected_rows

_GUEST_COLUMNS = "id, guest_token, name, menu, appetiser, allergies, steak_cook"


async def list_guests(database: Database) -> list[dict]:
    return await database.fetch_all(
        f"""
        SELECT {_GUEST_COLUMNS}
        FROM guests
        ORDER BY name ASC
        """
    )


async def get_guest_by_id(database: Database, guest_id: str) -> dict | None:
    return await database.fetch_one(
        f"""
        SELECT {_GUEST_COLUMNS}
        FROM guests
        WHERE id = $1
        """,
        guest_id,
    )


async def get_guest_by_token(database: Database, guest_token: str) -> dict | None:
    return await database.fetch_one(
        f"""
        SELECT {_GUEST_COLUMNS}
        FROM guests
        WHERE guest_token = $1
        """,
        guest_token,
    )


async def get_guest_by_name(database: Database, name: str) -> dict | None:
    return await database.fetch_one(
        f"""
        SELECT {_GUEST_COLUMNS}
        FROM guests
        WHERE lower(name) = lower($1)
        """,
        name,
    )


async def create_guest(
    database: Database,
    *,
    guest_id: str,
    guest_token: str,
    name: str,
    menu: str,
    appetiser: str,
    allergies: str,
    steak_cook: str,
) -> dict | None:
    """
    Insert a guest. Returns None when a unique key (name, token) is taken.
    """
    return await database.fetch_one(
        f"""
        INSERT INTO guests (id, guest_token, name, menu, appetiser, allergies, steak_cook)
        VALUES ($1, $2, $3, $4, $5, $6, $7)
        ON CONFLICT DO NOTHING
        RETURNING {_GUEST_COLUMNS}
        """,
        guest_id,
        guest_token,
        name,
        menu,
        appetiser,
        allergies,
        steak_cook,
    )


async def update_guest_preferences(
    database: Database,
    guest_token: str,
    *,
    menu: str,
    appetiser: str,
    allergies: str,
    steak_cook: str | None,
) -> dict | None:
    return await database.fetch_one(
        f"""
        UPDATE guests
        SET menu = $2,
            appetiser = $3,
            allergies = $4,
            steak_cook = $5
        WHERE guest_token = $1
        RETURNING {_GUEST_COLUMNS}
        """,
        guest_token,
        menu,
        appetiser,
        allergies,
        steak_cook,
    )


async def delete_guest_by_token(database: Database, identifier: str) -> bool:
    status = await database.execute(
        """
        DELETE FROM guests
        WHERE lower(guest_token) = lower($1)
        """,
        identifier,
    )
    return affected_rows(status) > 0


async def delete_guest_by_id(database: Database, identifier: str) -> bool:
    status = await database.execute(
        """
        DELETE FROM guests
        WHERE id = $1
        """,
        identifier,
    )
    return affected_rows(status) > 0


async def delete_guest_by_name(database: Database, identifier: str) -> bool:
    status = await database.execute(
        """
        DELETE FROM guests
        WHERE lower(name) = lower($1)
        """,
        identifier,
    )
    return affected_rows(status) > 0
