"""Role and permission-catalog endpoints under /advance/roles (bearer token required)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gatekeeper.api.v1.auth import get_current_identity
from gatekeeper.core.database import get_db
from gatekeeper.schemas.auth import CurrentIdentity
from gatekeeper.schemas.common import ApiResponse
from gatekeeper.schemas.roles import (
    PermissionsByModule,
    RoleCreated,
    RoleCreateRequest,
    RoleOption,
    RolesList,
)
from gatekeeper.services.permission_catalog import list_modules_with_permissions
from gatekeeper.services.roles import RoleManager
from gatekeeper.services.store import CredentialStore

router = APIRouter(dependencies=[Depends(get_current_identity)])


@router.get("/roles/permissions", response_model=ApiResponse[PermissionsByModule])
def get_permissions_by_module(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[PermissionsByModule]:
    """Every module with its permissions, for building role permission pickers."""
    modules = list_modules_with_permissions(CredentialStore(db))
    return ApiResponse[PermissionsByModule](
        message="Advance Permissions Fetched Successfully!",
        data=PermissionsByModule(permissions_by_module=modules),
    )


@router.post(
    "/roles",
    response_model=ApiResponse[RoleCreated],
    status_code=status.HTTP_201_CREATED,
)
def create_role(
    body: RoleCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
) -> ApiResponse[RoleCreated]:
    role_id = RoleManager(db).create_role(
        body.name,
        body.description,
        body.permissions,
        created_by=identity.user_id,
    )
    return ApiResponse[RoleCreated](
        code="ROLES_CREATED",
        message="Role created successfully",
        data=RoleCreated(id=role_id),
    )


@router.get("/roles", response_model=ApiResponse[RolesList])
def list_roles(db: Annotated[Session, Depends(get_db)]) -> ApiResponse[RolesList]:
    roles = RoleManager(db).list_roles()
    return ApiResponse[RolesList](
        message="Roles fetched successfully!",
        data=RolesList(roles=roles, count=len(roles)),
    )


@router.get("/roles/dropdown", response_model=ApiResponse[list[RoleOption]])
def list_role_options(
    db: Annotated[Session, Depends(get_db)],
) -> ApiResponse[list[RoleOption]]:
    return ApiResponse[list[RoleOption]](
        message="Roles fetched successfully!",
        data=RoleManager(db).list_roles_for_dropdown(),
    )
