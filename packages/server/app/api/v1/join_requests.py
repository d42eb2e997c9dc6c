"""
Join-request API endpoints.

POST   /api/v1/requests                                  Apply to join an org
GET    /api/v1/orgs/{orgId}/requests                     List pending requests
POST   /api/v1/orgs/{orgId}/requests/{requestId}/accept  Accept a request
POST   /api/v1/orgs/{orgId}/requests/{requestId}/decline Decline a request
"""

from __future__ import annotations

import uuid

from fastapi import APIRouter, Depends, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.auth import OrgContext, get_caller_id, get_org_context
from app.core.database import get_session
from app.services import join_requests as request_service
from orgbase_shared.schemas.join_requests import (
    JoinRequestCreate,
    JoinRequestListResponse,
    JoinRequestResponse,
    JoinRequestSubmitResponse,
)
from orgbase_shared.schemas.members import MemberResponse

# Applicants are not members yet, so submission is not org-scoped.
router_global = APIRouter()


@router_global.post(
    "/requests",
    response_model=JoinRequestSubmitResponse,
    status_code=202,
    tags=["Join Requests"],
)
async def submit_join_request(
    body: JoinRequestCreate,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
):
    """Apply to join an org. Re-submitting returns the pending request unchanged."""
    request, created = await request_service.submit_join_request(body, caller_id, session)
    await session.commit()
    return JoinRequestSubmitResponse(
        request=JoinRequestResponse.model_validate(request),
        created=created,
    )


router = APIRouter()


@router.get("", response_model=JoinRequestListResponse, tags=["Join Requests"])
async def list_join_requests(
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """List pending requests (owner or Admin)."""
    requests = await request_service.list_join_requests(ctx.org, ctx.caller_id, session)
    return JoinRequestListResponse(
        data=[JoinRequestResponse.model_validate(r) for r in requests]
    )


@router.post("/{requestId}/accept", response_model=MemberResponse, tags=["Join Requests"])
async def accept_join_request(
    requestId: uuid.UUID,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Accept a request; the applicant becomes a Member (owner or Admin)."""
    membership = await request_service.accept_join_request(
        ctx.org, ctx.caller_id, requestId, session
    )
    await session.commit()
    return MemberResponse(
        org_id=membership.org_id,
        member_id=membership.member_id,
        role=membership.role,
        is_owner=ctx.org.owner_id == membership.member_id,
        created_at=membership.created_at,
    )


@router.post("/{requestId}/decline", status_code=204, tags=["Join Requests"])
async def decline_join_request(
    requestId: uuid.UUID,
    ctx: OrgContext = Depends(get_org_context),
    session: AsyncSession = Depends(get_session),
):
    """Decline a request (owner or Admin). Unknown ids are ignored."""
    await request_service.decline_join_request(ctx.org, ctx.caller_id, requestId, session)
    await session.commit()
    return Response(status_code=204)
