"""Pydantic schemas for items."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gatehouse.core.constants import MAX_DESCRIPTION_LENGTH, MAX_ITEM_NAME_LENGTH
from gatehouse.core.permissions.schemas import AuthorizedModel


class ItemCreate(BaseModel):
    """Schema for creating an item."""

    name: str = Field(..., min_length=1, max_length=MAX_ITEM_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class ItemUpdate(BaseModel):
    """Schema for updating an item."""

    name: str | None = Field(None, min_length=1, max_length=MAX_ITEM_NAME_LENGTH)
    description: str | None = Field(None, max_length=MAX_DESCRIPTION_LENGTH)


class ItemResponse(AuthorizedModel):
    """Schema for item response data."""

    name: str
    description: str | None = None
    owner_id: int | None = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
