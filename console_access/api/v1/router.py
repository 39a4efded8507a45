"""API v1 router aggregation.

Includes all endpoint modules with consistent prefix and tags. Routes get
their collaborators from console_access.api.v1.dependencies.
"""

from fastapi import APIRouter

from console_access.api.v1.endpoints import health, permission_screens

api_router = APIRouter()

api_router.include_router(health.router, prefix="/health", tags=["health"])
api_router.include_router(
    permission_screens.router,
    prefix="/permission-screens",
    tags=["permission-screens"],
)
