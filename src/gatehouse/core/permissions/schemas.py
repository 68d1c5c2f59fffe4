"""Pydantic schemas for permissions, grants and authorization results."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from gatehouse.core.permissions.types import EntitySet, PermissionType


class AuthorizedModel(BaseModel):
    """Base for entity responses that can carry the caller's permission types.

    ``authorization`` stays None unless the request asked for it.
    """

    id: int
    authorization: list[PermissionType] | None = None


class PermissionResponse(BaseModel):
    """Schema for permission response data."""

    id: int
    entity_set: EntitySet
    permission_type: PermissionType
    entity: int | None = Field(None, description="Entity ID, or null for set level")
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PermissionCreate(BaseModel):
    """Schema for creating a single permission."""

    entity_set: EntitySet
    permission_type: PermissionType
    entity: int | None = Field(None, ge=1)


class RoleSummary(BaseModel):
    """Role embedded in grant and membership responses."""

    id: int
    name: str

    model_config = ConfigDict(from_attributes=True)


class UserSummary(BaseModel):
    """User embedded in grant and membership responses."""

    id: int
    name: str
    email: str

    model_config = ConfigDict(from_attributes=True)


class RolePermissionCreate(BaseModel):
    """Schema for granting a permission to a role."""

    role_id: int = Field(..., ge=1)
    permission_id: int = Field(..., ge=1)


class RolePermissionResponse(BaseModel):
    """A role -> permission grant with both sides embedded."""

    role_id: int
    permission_id: int
    created_at: datetime
    role: RoleSummary
    permission: PermissionResponse

    model_config = ConfigDict(from_attributes=True)


class UserPermissionCreate(BaseModel):
    """Schema for granting a permission directly to a user."""

    user_id: int = Field(..., ge=1)
    permission_id: int = Field(..., ge=1)


class UserPermissionResponse(BaseModel):
    """A direct user -> permission grant with both sides embedded."""

    user_id: int
    permission_id: int
    created_at: datetime
    user: UserSummary
    permission: PermissionResponse

    model_config = ConfigDict(from_attributes=True)


class UserRoleCreate(BaseModel):
    """Schema for adding a user to a role."""

    user_id: int = Field(..., ge=1)
    role_id: int = Field(..., ge=1)


class UserRoleResponse(BaseModel):
    """A user <-> role membership with both sides embedded."""

    user_id: int
    role_id: int
    created_at: datetime
    user: UserSummary
    role: RoleSummary

    model_config = ConfigDict(from_attributes=True)


class AccessScopeResponse(BaseModel):
    """Entities a user may act on for one (entity set, permission type)."""

    entity_set: EntitySet
    permission_type: PermissionType
    has_set_access: bool
    accessible_entities: list[int]


class PermissionTypesResponse(BaseModel):
    """Permission types a user holds on a set or one entity."""

    entity_set: EntitySet
    entity: int | None = None
    permission_types: list[PermissionType]


class AuthorizationSummaryResponse(BaseModel):
    """Entity sets a user holds grants on, split by grant scope."""

    set_level: list[EntitySet]
    instance_level: list[EntitySet]

    model_config = ConfigDict(from_attributes=True)


class AccessDecisionResponse(BaseModel):
    """Outcome of an access check for the calling user."""

    entity_set: EntitySet
    permission_type: PermissionType
    entities: list[int] | None = Field(None, description="Checked IDs, or null for set level")
    granted: bool
