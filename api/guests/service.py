"""
Guest business logic.

Guests are matched to seats by name only, on the client; nothing here links
the two tables.
"""

from __future__ import annotations

import json
import logging
from typing import Awaitable, Callable
from uuid import uuid4

from core.db import Database
from core.errors import ConflictError, InvalidInputError, NotFoundError

from . import repository, schemas

logger = logging.getLogger(__name__)

GUEST_NOT_FOUND = "Guest not found"

DeleteStrategy = Callable[[Database, str], Awaitable[bool]]

# Tried in order; the first strategy that deletes a row wins.
DELETE_STRATEGIES: tuple[tuple[str, DeleteStrategy], ...] = (
    ("token", repository.delete_guest_by_token),
    ("id", repository.delete_guest_by_id),
    ("name", repository.delete_guest_by_name),
)


def parse_allergies(raw: str | None) -> list:
    if not raw:
        return []
    try:
        allergies = json.loads(raw)
    except (TypeError, ValueError):
        return []
    return allergies if isinstance(allergies, list) else []


def to_guest_response(row: dict) -> dict:
    return {
        "id": str(row["id"]),
        "guestToken": str(row["guest_token"]),
        "name": str(row["name"]),
        "menu": row.get("menu"),
        "appetiser": row.get("appetiser"),
        "allergies": parse_allergies(row.get("allergies")),
        "steakCook": row.get("steak_cook"),
    }


async def create_guest(database: Database, payload: schemas.CreateGuestRequest) -> dict:
    name = (payload.name or "").strip()
    if not name:
        raise InvalidInputError("Guest name is required")

    existing = await repository.get_guest_by_name(database, name)
    if existing is not None:
        raise ConflictError("Guest already exists")

    row = await repository.create_guest(
        database,
        guest_id=str(uuid4()),
        guest_token=str(uuid4()),
        name=name,
        menu=payload.menu or "",
        appetiser=payload.appetiser or "",
        allergies=json.dumps(payload.allergies or []),
        steak_cook=payload.steak_cook or "",
    )
    if row is None:
        # Lost a race with a concurrent insert of the same name.
        raise ConflictError("Guest already exists")

    logger.info("guest_created guest_id=%s", row["id"])
    return to_guest_response(row)


async def list_guests(database: Database) -> list[dict]:
    rows = await repository.list_guests(database)
    return [to_guest_response(row) for row in rows]


async def get_guest_by_id(database: Database, guest_id: str) -> dict:
    row = await repository.get_guest_by_id(database, guest_id)
    if row is None:
        raise NotFoundError(GUEST_NOT_FOUND)
    return to_guest_response(row)


async def get_guest_by_token(database: Database, guest_token: str) -> dict:
    row = await repository.get_guest_by_token(database, guest_token)
    if row is None:
        raise NotFoundError(GUEST_NOT_FOUND)
    return to_guest_response(row)


async def update_guest(
    database: Database,
    guest_token: str,
    payload: schemas.UpdateGuestRequest,
) -> dict:
    row = await repository.update_guest_preferences(
        database,
        guest_token,
        menu=payload.menu or "",
        appetiser=payload.appetiser or "",
        allergies=json.dumps(payload.allergies or []),
        steak_cook=payload.steak_cook,
    )
    if row is None:
        raise NotFoundError(GUEST_NOT_FOUND)

    logger.info("guest_updated guest_id=%s", row["id"])
    return to_guest_response(row)


async def delete_guest(database: Database, identifier: str) -> dict:
    identifier = (identifier or "").strip()
    if identifier:
        for label, strategy in DELETE_STRATEGIES:
            if await strategy(database, identifier):
                logger.info("guest_deleted matched_by=%s", label)
                return {"message": f"Guest deleted successfully by {label}"}

    raise NotFoundError("Guest not found for deletion")
