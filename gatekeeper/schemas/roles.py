"""Request/response schemas for roles and the permission catalog."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class PermissionItem(BaseModel):
    """One permission inside a module group."""

    id: int
    code: str
    name: str


class ModulePermissions(BaseModel):
    """A module with its permissions in permission id order."""

    module: str = Field(..., description="Module name")
    permissions: list[PermissionItem] = Field(default_factory=list)


class PermissionsByModule(BaseModel):
    permissions_by_module: list[ModulePermissions]


class RoleCreateRequest(BaseModel):
    """Body for POST /advance/roles. Values are boolean-like enable states."""

    name: str | None = None
    description: str | None = None
    permissions: dict[str, Any] = Field(default_factory=dict)


class RoleSummary(BaseModel):
    """Role as returned by list endpoints."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    description: str
    permissions: dict[str, bool]
    status: bool
    created_by: int | None = None


class RoleCreated(BaseModel):
    id: int


class RolesList(BaseModel):
    roles: list[RoleSummary]
    count: int


class RoleOption(BaseModel):
    """Minimal projection for dropdowns."""

    id: int
    name: str
