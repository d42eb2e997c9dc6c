"""
Organization API endpoints.

GET    /api/v1/orgs                 List orgs for authenticated user
POST   /api/v1/orgs                 Create a new org
GET    /api/v1/orgs/{orgId}         Get org details
PUT    /api/v1/orgs/{orgId}/name    Rename org (owner or Admin)
PUT    /api/v1/orgs/{orgId}/image   Change org image (owner or Admin)
DELETE /api/v1/orgs/{orgId}         Delete org (owner only)
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import OrgContext, get_caller_id, get_org_context
from app.core.database import get_session
from app.services import organizations as org_service
from orgbase_shared.schemas.organizations import (
    OrgCreateRequest,
    OrgListResponse,
    OrgReimageRequest,
    OrgRenameRequest,
    OrgResponse,
)


# ---------------------------------------------------------------------------
# Non-org-scoped routes (no orgId in path)
# ---------------------------------------------------------------------------
router_global = APIRouter()


@router_global.get("/orgs", response_model=OrgListResponse, tags=["Organizations"])
async def list_orgs(
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """List orgs the authenticated user owns or belongs to."""
    items = await org_service.list_user_orgs(caller_id, session)
    return OrgListResponse(data=items)


@router_global.post("/orgs", response_model=OrgResponse, status_code=201, tags=["Organizations"])
async def create_org(
    body: OrgCreateRequest,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Create a new organization. The creator becomes its owner and an Admin."""
    org = await org_service.create_org(body, caller_id, session)
    await session.commit()
    return OrgResponse.model_validate(org)


# ---------------------------------------------------------------------------
# Org-scoped routes (orgId in path is the caller's current org context)
# ---------------------------------------------------------------------------
router_scoped = APIRouter()


@router_scoped.get("", response_model=OrgResponse, tags=["Organizations"])
async def get_org(
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Get org details."""
    org = await org_service.get_org(ctx.org_id, ctx.caller_id, session)
    return OrgResponse.model_validate(org)


@router_scoped.put("/name", response_model=OrgResponse, tags=["Organizations"])
async def rename_org(
    body: OrgRenameRequest,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Rename the org (owner or Admin)."""
    org = await org_service.rename_org(ctx.org, ctx.caller_id, body, session)
    await session.commit()
    return OrgResponse.model_validate(org)


@router_scoped.put("/image", response_model=OrgResponse, tags=["Organizations"])
async def reimage_org(
    body: OrgReimageRequest,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Change the org image URL (owner or Admin)."""
    org = await org_service.reimage_org(ctx.org, ctx.caller_id, body, session)
    await session.commit()
    return OrgResponse.model_validate(org)


@router_scoped.delete("", status_code=204, tags=["Organizations"])
async def delete_org(
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Delete the org with its memberships and pending requests (owner only)."""
    await org_service.delete_org(ctx.org, ctx.caller_id, session)
    await session.commit()
    return Response(status_code=204)
