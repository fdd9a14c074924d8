"""
Layout business logic: the seat-assignment overlay.

A layout is stored as an opaque JSON list of seat elements. Seat assignments
live in their own table keyed by `(layout_id, seat_id)` and are merged onto
the elements on read, so re-saving a layout never loses assignments. Rows for
seat ids that disappear from the layout are kept as orphans.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Iterable

from core.db import Database
from core.errors import InvalidDataError, InvalidInputError, NotFoundError

from . import repository

logger = logging.getLogger(__name__)

LAYOUT_NOT_FOUND = "Layout not found"
INVALID_LAYOUT_DATA = "Invalid layout data"

# Literal sent by clients that stringify a missing guest.
_NULL_LITERAL = "null"


def normalize_guest_name(guest_name: Any) -> str | None:
    """
    Return the guest name to store, or None for "unassigned".

    Absent, blank, and the literal string "null" (any case) all unassign.
    """
    if guest_name is None:
        return None
    text = str(guest_name).strip()
    if not text or text.lower() == _NULL_LITERAL:
        return None
    return text


def normalize_seat_id(seat_id: Any) -> str:
    text = "" if seat_id is None else str(seat_id).strip()
    if not text:
        raise InvalidInputError("Seat id is required")
    return text


def _seat_key(element: dict[str, Any]) -> str | None:
    seat_id = element.get("id")
    if seat_id is None:
        return None
    return str(seat_id)


def build_guest_map(assignments: Iterable[dict[str, Any]]) -> dict[str, str | None]:
    return {str(row["seat_id"]): row.get("guest_name") for row in assignments}


def merge_elements(
    elements: list[dict[str, Any]],
    guest_map: dict[str, str | None],
) -> list[dict[str, Any]]:
    """
    Overlay assigned guests onto layout elements, preserving element order.

    An assignment wins when it is non-empty; otherwise the element's embedded
    `guest` is kept; otherwise `guest` is None. Input elements are not mutated.
    """
    merged: list[dict[str, Any]] = []
    for element in elements:
        key = _seat_key(element)
        assigned = guest_map.get(key) if key is not None else None
        merged.append({**element, "guest": assigned or element.get("guest") or None})
    return merged


def decode_elements(data: str) -> list[dict[str, Any]]:
    try:
        elements = json.loads(data)
    except (TypeError, ValueError) as exc:
        raise InvalidDataError(INVALID_LAYOUT_DATA) from exc

    if not isinstance(elements, list) or not all(isinstance(el, dict) for el in elements):
        raise InvalidDataError(INVALID_LAYOUT_DATA)
    return elements


def encode_elements(elements: list[dict[str, Any]]) -> str:
    return json.dumps(elements, separators=(",", ":"))


async def _require_layout(database: Database, name: str) -> dict:
    row = await repository.get_layout_by_name(database, name)
    if row is None:
        raise NotFoundError(LAYOUT_NOT_FOUND)
    return row


async def list_layouts(database: Database) -> list[str]:
    return await repository.list_layout_names(database)


async def get_merged_layout(database: Database, name: str) -> dict:
    row = await _require_layout(database, name)
    try:
        elements = decode_elements(row["data"])
    except InvalidDataError:
        logger.error("layout_data_unreadable layout=%r layout_id=%s", name, row["id"])
        raise

    assignments = await repository.list_assignments(database, int(row["id"]))
    merged = merge_elements(elements, build_guest_map(assignments))
    return {"name": name, "elements": merged}


async def save_layout(database: Database, name: str | None, elements: Any) -> dict:
    # Stored as given; lookups by path use the exact name.
    name = name or ""
    if not name.strip() or not isinstance(elements, list) or not all(isinstance(el, dict) for el in elements):
        raise InvalidInputError(INVALID_LAYOUT_DATA)

    row = await repository.upsert_layout(database, name=name, data=encode_elements(elements))
    inserted = bool(row["inserted"])
    logger.info(
        "layout_saved layout=%r layout_id=%s elements=%s inserted=%s",
        name,
        row["id"],
        len(elements),
        inserted,
    )
    return {"message": "Layout saved" if inserted else "Layout updated", "name": name}


async def assign_seat(
    database: Database,
    layout_name: str,
    seat_id: Any,
    guest_name: Any,
) -> dict:
    """
    Upsert one seat's guest. Last writer wins; repeating a call is a no-op.
    """
    seat = normalize_seat_id(seat_id)
    guest = normalize_guest_name(guest_name)
    row = await _require_layout(database, layout_name)

    saved = await repository.upsert_assignment(
        database,
        layout_id=int(row["id"]),
        seat_id=seat,
        guest_name=guest,
    )
    if saved is None:
        raise NotFoundError(LAYOUT_NOT_FOUND)
    logger.info("seat_assigned layout=%r seat_id=%r guest=%r", layout_name, seat, guest)
    return {"success": True, "seatId": seat, "guestName": guest}


async def delete_layout(database: Database, name: str) -> dict:
    row = await _require_layout(database, name)
    layout_id = int(row["id"])

    # Assignments first. Rows inserted between the two statements are removed
    # by the foreign key cascade.
    removed = await repository.delete_assignments(database, layout_id)
    deleted = await repository.delete_layout(database, layout_id)
    if not deleted:
        raise NotFoundError(LAYOUT_NOT_FOUND)

    logger.info("layout_deleted layout=%r layout_id=%s assignments_removed=%s", name, layout_id, removed)
    return {"message": "Layout deleted", "name": name}
