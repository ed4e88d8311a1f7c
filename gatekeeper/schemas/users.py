"""Request/response schemas for user accounts."""

from typing import Any

from pydantic import BaseModel, ConfigDict


class UserCreateRequest(BaseModel):
    """Body for POST /advance/users. Required fields are checked by the service."""

    name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    username: str | None = None
    password: str | None = None
    role_id: int | str | None = None
    is_auto_property_assign: bool | int | str | None = None


class UserPatchRequest(BaseModel):
    """Body for PATCH /advance/users/{id}. Only fields present are applied."""

    name: str | None = None
    email: str | None = None
    mobile_no: str | None = None
    username: str | None = None
    role_id: int | str | None = None
    is_auto_property_assign: bool | int | str | None = None
    status: bool | int | str | None = None


class UserCreated(BaseModel):
    id: int


class UserOut(BaseModel):
    """User entry for list/patch responses (no password)."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    email: str
    mobile_no: str
    username: str
    role_id: int | None = None
    role_name: str | None = None
    is_auto_property_assign: bool
    permissions: dict[str, Any] | None = None
    status: bool
    created_by: int | None = None


class UsersList(BaseModel):
    users: list[UserOut]
    count: int
