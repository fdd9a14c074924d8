"""
Layout API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from core.db import Database, get_database

from . import schemas, service

router = APIRouter(prefix="/api/layouts")


@router.get("")
async def list_layouts(database: Database = Depends(get_database)) -> list[str]:
    return await service.list_layouts(database)


@router.get("/{name}")
async def get_layout(name: str, database: Database = Depends(get_database)) -> dict:
    """
    Layout elements with persisted seat assignments merged in.
    """
    return await service.get_merged_layout(database, name)


@router.post("")
async def save_layout(
    request: schemas.SaveLayoutRequest,
    database: Database = Depends(get_database),
) -> dict:
    return await service.save_layout(database, request.name, request.elements)


@router.delete("/{name}")
async def delete_layout(name: str, database: Database = Depends(get_database)) -> dict:
    return await service.delete_layout(database, name)


@router.post("/{layout_name}/assign-seat")
async def assign_seat(
    layout_name: str,
    request: schemas.AssignSeatRequest,
    database: Database = Depends(get_database),
) -> dict:
    return await service.assign_seat(database, layout_name, request.seat_id, request.guest_name)
