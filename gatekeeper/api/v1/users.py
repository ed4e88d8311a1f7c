"""User account endpoints under /advance/users (bearer token required)."""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from gatekeeper.api.v1.auth import get_current_identity, get_password_hasher
from gatekeeper.core.database import get_db
from gatekeeper.core.security import PasswordHasher
from gatekeeper.schemas.auth import CurrentIdentity
from gatekeeper.schemas.common import ApiResponse
from gatekeeper.schemas.users import (
    UserCreated,
    UserCreateRequest,
    UserOut,
    UserPatchRequest,
    UsersList,
)
from gatekeeper.services.accounts import UserAccountManager

router = APIRouter()


@router.post(
    "/users",
    response_model=ApiResponse[UserCreated],
    status_code=status.HTTP_201_CREATED,
)
def create_user(
    body: UserCreateRequest,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
) -> ApiResponse[UserCreated]:
    """Register a user and snapshot the assigned role's permissions."""
    user_id = UserAccountManager(db, hasher).register(
        body.model_dump(), created_by=identity.user_id
    )
    return ApiResponse[UserCreated](
        code="USER_CREATED",
        message="User created successfully",
        data=UserCreated(id=user_id),
    )


@router.get("/users", response_model=ApiResponse[UsersList])
def list_users(
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    _identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
) -> ApiResponse[UsersList]:
    users = UserAccountManager(db, hasher).list_users()
    return ApiResponse[UsersList](
        message="User fetched successfully!",
        data=UsersList(users=users, count=len(users)),
    )


@router.patch("/users/{user_id}", response_model=ApiResponse[UserOut])
def patch_user(
    user_id: int,
    body: UserPatchRequest,
    db: Annotated[Session, Depends(get_db)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
    identity: Annotated[CurrentIdentity, Depends(get_current_identity)],
) -> ApiResponse[UserOut]:
    """Update only the fields present in the body; all-or-nothing."""
    user = UserAccountManager(db, hasher).patch(
        user_id, body.model_dump(exclude_unset=True), actor_id=identity.user_id
    )
    return ApiResponse[UserOut](
        code="USER_UPDATED",
        message="User updated successfully",
        data=user,
    )
