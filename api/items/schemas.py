"""
Pydantic schemas for items.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Item(BaseModel):
    """
    One catalogue entry.

    Field names match the persisted JSON layout. Items are immutable once
    created and are identified only by their position in the item list.
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    image_name: str = ""

    @field_validator("name", "category")
    @classmethod
    def _not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class ItemsResponse(BaseModel):
    items: list[Item]


class AddItemResponse(BaseModel):
    message: str
    item: Item
