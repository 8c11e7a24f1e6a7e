"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import auth, health, public, user

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(public.router, prefix="/public", tags=["Public"])
router.include_router(auth.router, prefix="/auth", tags=["Authentication"])
router.include_router(user.router, prefix="/user", tags=["User"])
