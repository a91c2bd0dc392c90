"""
API v1 router combining all v1 endpoints.
"""
from fastapi import APIRouter

from attempt_service.api.v1 import attempts, health

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(attempts.router, prefix="/attempts", tags=["attempts"])
