"""API v1 routes."""

from fastapi import APIRouter

from portal_api.api.v1 import auth, content, health, legislators, tabs, users

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(auth.router, prefix="/auth", tags=["auth"])
router.include_router(users.router, prefix="/users", tags=["users"])
router.include_router(content.router, prefix="/content", tags=["content"])
router.include_router(legislators.router, prefix="/legislators", tags=["legislators"])
router.include_router(tabs.router, prefix="/tabs", tags=["tabs"])
