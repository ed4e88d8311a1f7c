"""API v1 routes."""

from fastapi import APIRouter

from gatekeeper.api.v1 import auth, health, roles, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, tags=["auth"])
router.include_router(users.router, prefix="/advance", tags=["users"])
router.include_router(roles.router, prefix="/advance", tags=["roles"])
