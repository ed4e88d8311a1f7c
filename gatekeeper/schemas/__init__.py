"""Pydantic request/response schemas."""

from gatekeeper.schemas.auth import CurrentIdentity, LoginRequest, LoginResult
from gatekeeper.schemas.common import ApiResponse, ErrorResponse
from gatekeeper.schemas.health import HealthResponse
from gatekeeper.schemas.roles import (
    ModulePermissions,
    PermissionItem,
    PermissionsByModule,
    RoleCreated,
    RoleCreateRequest,
    RoleOption,
    RolesList,
    RoleSummary,
)
from gatekeeper.schemas.users import (
    UserCreated,
    UserCreateRequest,
    UserOut,
    UserPatchRequest,
    UsersList,
)

__all__ = [
    "ApiResponse",
    "CurrentIdentity",
    "ErrorResponse",
    "HealthResponse",
    "LoginRequest",
    "LoginResult",
    "ModulePermissions",
    "PermissionItem",
    "PermissionsByModule",
    "RoleCreateRequest",
    "RoleCreated",
    "RoleOption",
    "RoleSummary",
    "RolesList",
    "UserCreateRequest",
    "UserCreated",
    "UserOut",
    "UserPatchRequest",
    "UsersList",
]
