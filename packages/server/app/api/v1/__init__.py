"""
API v1 Router

All org-scoped endpoints are prefixed with /orgs/{orgId}.
"""

from fastapi import APIRouter
from . import join_requests, members
from .organizations import router_global as orgs_global_router
from .organizations import router_scoped as orgs_scoped_router

router = APIRouter()

# Organization routes (non-org-scoped: list, create)
router.include_router(orgs_global_router)

# Join-request submission (caller is not yet a member)
router.include_router(join_requests.router_global)

# Organization routes (org-scoped: get, rename, re-image, delete)
router.include_router(orgs_scoped_router, prefix="/orgs/{orgId}", tags=["Organizations"])

router.include_router(join_requests.router, prefix="/orgs/{orgId}/requests", tags=["Join Requests"])
router.include_router(members.router, prefix="/orgs/{orgId}/members", tags=["Members"])


@router.get("/", tags=["API"])
async def api_root():
    """API root: returns version and available endpoints."""
    return {
        "api": "v1",
        "version": "0.1.0",
        "endpoints": [
            "/orgs",
            "/requests",
            "/orgs/{orgId}",
            "/orgs/{orgId}/requests",
            "/orgs/{orgId}/members",
        ],
    }
