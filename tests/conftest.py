"""
Shared fixtures.

`MemoryStore` stands in for Postgres at the repository seam: the fixture
swaps every repository function for the store's method of the same name, so
services and routes run unchanged against plain Python state.
"""

from __future__ import annotations

from itertools import count
from types import SimpleNamespace

import pytest
from fastapi.testclient import TestClient

from core.db import get_database
from guests import repository as guests_repository
from guests import service as guests_service
from layouts import repository as layouts_repository


class MemoryStore:
    def __init__(self) -> None:
        self.layouts: dict[int, dict] = {}
        # (layout_id, seat_id) -> guest_name
        self.assignments: dict[tuple[int, str], str | None] = {}
        self.guests: dict[str, dict] = {}
        self._layout_ids = count(1)

    # layouts

    async def list_layout_names(self, database) -> list[str]:
        return [row["name"] for _, row in sorted(self.layouts.items())]

    async def get_layout_by_name(self, database, name: str) -> dict | None:
        for row in self.layouts.values():
            if row["name"] == name:
                return dict(row)
        return None

    async def upsert_layout(self, database, *, name: str, data: str) -> dict:
        existing = await self.get_layout_by_name(database, name)
        if existing is not None:
            self.layouts[existing["id"]]["data"] = data
            return {"id": existing["id"], "name": name, "inserted": False}
        layout_id = next(self._layout_ids)
        self.layouts[layout_id] = {"id": layout_id, "name": name, "data": data}
        return {"id": layout_id, "name": name, "inserted": True}

    async def list_assignments(self, database, layout_id: int) -> list[dict]:
        return [
            {"seat_id": seat_id, "guest_name": guest_name}
            for (owner, seat_id), guest_name in self.assignments.items()
            if owner == layout_id
        ]

    async def upsert_assignment(self, database, *, layout_id: int, seat_id: str, guest_name: str | None) -> dict | None:
        if layout_id not in self.layouts:
            return None
        self.assignments[(layout_id, seat_id)] = guest_name
        return {"seat_id": seat_id, "guest_name": guest_name}

    async def delete_assignments(self, database, layout_id: int) -> int:
        keys = [key for key in self.assignments if key[0] == layout_id]
        for key in keys:
            del self.assignments[key]
        return len(keys)

    async def delete_layout(self, database, layout_id: int) -> bool:
        # Mirrors ON DELETE CASCADE on seat_assignments.layout_id.
        await self.delete_assignments(database, layout_id)
        return self.layouts.pop(layout_id, None) is not None

    # guests

    async def list_guests(self, database) -> list[dict]:
        return sorted((dict(row) for row in self.guests.values()), key=lambda row: row["name"])

    async def get_guest_by_id(self, database, guest_id: str) -> dict | None:
        row = self.guests.get(guest_id)
        return dict(row) if row is not None else None

    async def get_guest_by_token(self, database, guest_token: str) -> dict | None:
        for row in self.guests.values():
            if row["guest_token"] == guest_token:
                return dict(row)
        return None

    async def get_guest_by_name(self, database, name: str) -> dict | None:
        for row in self.guests.values():
            if row["name"].lower() == name.lower():
                return dict(row)
        return None

    async def create_guest(self, database, *, guest_id: str, guest_token: str, name: str, **fields) -> dict | None:
        if await self.get_guest_by_name(database, name) is not None:
            return None
        row = {"id": guest_id, "guest_token": guest_token, "name": name, **fields}
        self.guests[guest_id] = row
        return dict(row)

    async def update_guest_preferences(self, database, guest_token: str, **fields) -> dict | None:
        row = await self.get_guest_by_token(database, guest_token)
        if row is None:
            return None
        self.guests[row["id"]].update(fields)
        return dict(self.guests[row["id"]])

    def _delete_where(self, predicate) -> bool:
        doomed = [guest_id for guest_id, row in self.guests.items() if predicate(row)]
        for guest_id in doomed:
            del self.guests[guest_id]
        return bool(doomed)

    async def delete_guest_by_token(self, database, identifier: str) -> bool:
        return self._delete_where(lambda row: row["guest_token"].lower() == identifier.lower())

    async def delete_guest_by_id(self, database, identifier: str) -> bool:
        return self._delete_where(lambda row: row["id"] == identifier)

    async def delete_guest_by_name(self, database, identifier: str) -> bool:
        return self._delete_where(lambda row: row["name"].lower() == identifier.lower())


_LAYOUT_FUNCTIONS = (
    "list_layout_names",
    "get_layout_by_name",
    "upsert_layout",
    "list_assignments",
    "upsert_assignment",
    "delete_assignments",
    "delete_layout",
)

_GUEST_FUNCTIONS = (
    "list_guests",
    "get_guest_by_id",
    "get_guest_by_token",
    "get_guest_by_name",
    "create_guest",
    "update_guest_preferences",
    "delete_guest_by_token",
    "delete_guest_by_id",
    "delete_guest_by_name",
)


@pytest.fixture
def store(monkeypatch) -> MemoryStore:
    memory = MemoryStore()
    for name in _LAYOUT_FUNCTIONS:
        monkeypatch.setattr(layouts_repository, name, getattr(memory, name))
    for name in _GUEST_FUNCTIONS:
        monkeypatch.setattr(guests_repository, name, getattr(memory, name))
    monkeypatch.setattr(
        guests_service,
        "DELETE_STRATEGIES",
        tuple((label, getattr(memory, f"delete_guest_by_{label}")) for label, _ in guests_service.DELETE_STRATEGIES),
    )
    return memory


@pytest.fixture
def database() -> SimpleNamespace:
    # Repositories are replaced by `store`; the handle is only passed through.
    return SimpleNamespace()


@pytest.fixture
def client(store, database):
    from main import app

    app.dependency_overrides[get_database] = lambda: database
    try:
        yield TestClient(app, raise_server_exceptions=False)
    finally:
        app.dependency_overrides.clear()
