"""
Membership roster API endpoints.

GET    /api/v1/orgs/{orgId}/members            List org members
PATCH  /api/v1/orgs/{orgId}/members            Change a member's role
DELETE /api/v1/orgs/{orgId}/members/{userId}   Remove a member
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import OrgContext, get_org_context
from app.core.database import get_session
from app.services import members as member_service
from orgbase_shared.schemas.common import MutationResponse
from orgbase_shared.schemas.members import (
    MemberListResponse,
    MemberResponse,
    MemberRoleUpdateRequest,
)

router = APIRouter()


@router.get("", response_model=MemberListResponse, tags=["Members"])
async def list_members(
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """List all members of the org."""
    items = await member_service.list_members(ctx.org, ctx.caller_id, session)
    return MemberListResponse(data=[MemberResponse(**item) for item in items])


@router.patch("", response_model=MutationResponse, tags=["Members"])
async def change_member_role(
    body: MemberRoleUpdateRequest,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Change a member's role. Only the owner may promote to Admin."""
    info = await member_service.change_member_role(ctx.org, ctx.caller_id, body, session)
    await session.commit()
    return MutationResponse(message="Member role updated", affected=1 if info else 0)


@router.delete("/{userId}", status_code=204, tags=["Members"])
async def remove_member(
    userId: uuid.UUID,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Remove a member from the org (owner or Admin)."""
    await member_service.remove_member(ctx.org, ctx.caller_id, userId, session)
    await session.commit()
    return Response(status_code=204)
