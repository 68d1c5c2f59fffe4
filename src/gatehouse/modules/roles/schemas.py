"""Pydantic schemas for roles."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gatehouse.core.constants import MAX_ROLE_NAME_LENGTH
from gatehouse.core.permissions.schemas import AuthorizedModel


class RoleCreate(BaseModel):
    """Schema for creating a role."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)


class RoleUpdate(BaseModel):
    """Schema for renaming a role."""

    name: str = Field(..., min_length=1, max_length=MAX_ROLE_NAME_LENGTH)


class RoleResponse(AuthorizedModel):
    """Schema for role response data."""

    name: str
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)
