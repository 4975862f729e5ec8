"""API v1 routes."""

from fastapi import APIRouter

from app.api.v1 import health, service_instance, user

router = APIRouter()
router.include_router(health.router, prefix="/health", tags=["health"])
router.include_router(user.router, prefix="/user", tags=["user"])
router.include_router(service_instance.router, prefix="/service-instances", tags=["service-instances"])
