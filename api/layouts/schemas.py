"""
Pydantic schemas for layout endpoints.

Wire keys are camelCase to match the frontend (`seatId`, `guestName`).
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class SaveLayoutRequest(BaseModel):
    name: str | None = Field(default=None, max_length=200)
    # Checked by the service: a list of opaque seat-element objects.
    elements: Any = None


class AssignSeatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    seat_id: str | int | None = Field(default=None, alias="seatId")
    guest_name: str | None = Field(default=None, alias="guestName", max_length=200)
