"""Login endpoint and the bearer-token gate (get_current_identity)."""

import logging
from functools import lru_cache
from typing import Annotated

from fastapi import APIRouter, Depends, Header, Request
from sqlalchemy.orm import Session

from gatekeeper.core.config import settings
from gatekeeper.core.database import get_db
from gatekeeper.core.errors import Unauthorized
from gatekeeper.core.security import PasswordHasher, TokenService
from gatekeeper.schemas.auth import CurrentIdentity, LoginRequest, LoginResult
from gatekeeper.schemas.common import ApiResponse
from gatekeeper.services.accounts import UserAccountManager

logger = logging.getLogger(__name__)
router = APIRouter()


def get_token_service(request: Request) -> TokenService:
    """The process-wide TokenService built at startup (see gatekeeper.main)."""
    return request.app.state.token_service


@lru_cache
def get_password_hasher() -> PasswordHasher:
    return PasswordHasher(rounds=settings.BCRYPT_ROUNDS)


def get_current_identity(
    request: Request,
    tokens: Annotated[TokenService, Depends(get_token_service)],
    authorization: Annotated[str | None, Header()] = None,
) -> CurrentIdentity:
    """
    Dependency: require a valid Bearer token and attach the user id to request.state.

    Missing header -> NO_TOKEN, not 'Bearer <token>' or undecodable ->
    INVALID_TOKEN, bad signature or expired -> UNAUTHORIZED. All are 401.
    """
    try:
        user_id = tokens.verify_header(authorization)
    except Unauthorized as e:
        logger.info("Rejected %s %s: %s (%s)", request.method, request.url.path, e.code, e.message)
        raise
    request.state.user_id = user_id
    return CurrentIdentity(user_id=user_id)


@router.post("/login", response_model=ApiResponse[LoginResult])
def login(
    body: LoginRequest,
    db: Annotated[Session, Depends(get_db)],
    tokens: Annotated[TokenService, Depends(get_token_service)],
    hasher: Annotated[PasswordHasher, Depends(get_password_hasher)],
) -> ApiResponse[LoginResult]:
    """
    Authenticate with username and password; returns a JWT access token.
    Include the token in the Authorization header as: Bearer <access_token>
    """
    result = UserAccountManager(db, hasher, tokens).login(body.username, body.password)
    return ApiResponse[LoginResult](
        code="USER_LOGGED_IN",
        message="User login successfully",
        data=result,
    )
