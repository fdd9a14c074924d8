"""
Guest API schemas (request models).
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class _GuestPreferences(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    menu: str | None = Field(default=None, max_length=200)
    appetiser: str | None = Field(default=None, max_length=200)
    allergies: list[str] | None = None
    steak_cook: str | None = Field(default=None, alias="steakCook", max_length=100)


class CreateGuestRequest(_GuestPreferences):
    name: str | None = Field(default=None, max_length=200)


class UpdateGuestRequest(_GuestPreferences):
    pass
