"""Request/response schemas for login and the authenticated identity."""

from pydantic import BaseModel, Field


class LoginRequest(BaseModel):
    """Credentials for login. Blank values are rejected by the service as INVALID_INPUT."""

    username: str | None = Field(default=None, description="Username")
    password: str | None = Field(default=None, description="Password")


class LoginResult(BaseModel):
    """Token plus non-sensitive profile fields. Never carries the password hash."""

    access_token: str = Field(..., description="JWT access token")
    token_type: str = Field(default="bearer", description="Token type")
    id: int
    user_name: str
    user_type: str = "advance"
    email: str
    mobile_no: str


class CurrentIdentity(BaseModel):
    """Identity resolved from a verified bearer token."""

    user_id: int
