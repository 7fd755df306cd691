"""
Main API router that includes all endpoint routers.
"""
from fastapi import APIRouter

from tracker.api.v1.endpoints import admin, auth, contacts, requirements


# Create main API router
api_router = APIRouter()

# Include all endpoint routers with appropriate tags
api_router.include_router(
    auth.router,
    prefix="/auth",
    tags=["Authentication"]
)
api_router.include_router(
    contacts.router,
    prefix="/contacts",
    tags=["Contacts"]
)
api_router.include_router(
    requirements.router,
    prefix="/requirements",
    tags=["Requirements"]
)
api_router.include_router(
    admin.router,
    prefix="/admin",
    tags=["Admin"]
)
