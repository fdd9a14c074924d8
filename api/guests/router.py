"""
Guest API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends, status

from core.db import Database, get_database

from . import schemas, service

router = APIRouter(prefix="/api/guests")


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_guest(
    request: schemas.CreateGuestRequest,
    database: Database = Depends(get_database),
) -> dict:
    return await service.create_guest(database, request)


@router.get("")
async def list_guests(database: Database = Depends(get_database)) -> list[dict]:
    return await service.list_guests(database)


@router.get("/id/{guest_id}")
async def get_guest_by_id(guest_id: str, database: Database = Depends(get_database)) -> dict:
    return await service.get_guest_by_id(database, guest_id)


@router.get("/token/{guest_token}")
async def get_guest_by_token(guest_token: str, database: Database = Depends(get_database)) -> dict:
    return await service.get_guest_by_token(database, guest_token)


@router.put("/{guest_token}")
async def update_guest(
    guest_token: str,
    request: schemas.UpdateGuestRequest,
    database: Database = Depends(get_database),
) -> dict:
    """
    Replace a guest's dining preferences. Omitted fields are cleared.
    """
    return await service.update_guest(database, guest_token, request)


@router.delete("/{identifier}")
async def delete_guest(identifier: str, database: Database = Depends(get_database)) -> dict:
    """
    Delete by guest token, else by id, else by name (case-insensitive).
    """
    return await service.delete_guest(database, identifier)
