"""
Join-request service: submit, accept and decline applications to join an org.

A request is pending while its row exists; accepting turns it into a
membership and declining discards it. Both remove the row.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import delete
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotFound
from app.models.join_request import JoinRequest
from app.models.membership import Membership
from app.models.organization import Organization
from app.services.authorization import Action, authorize

from orgbase_shared.schemas.common import Role
from orgbase_shared.schemas.join_requests import JoinRequestCreate

log = structlog.get_logger()

# Dialects whose INSERT supports ON CONFLICT DO NOTHING.
_CONFLICT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


async def _find_request(
    org_id: uuid.UUID, user_id: uuid.UUID, session: AsyncSession
) -> Optional[JoinRequest]:
    result = await session.execute(
        select(JoinRequest).where(
            JoinRequest.org_id == org_id, JoinRequest.user_id == user_id
        )
    )
    return result.scalar_one_or_none()


async def submit_join_request(
    req: JoinRequestCreate,
    caller_id: uuid.UUID,
    session: AsyncSession,
) -> tuple[JoinRequest, bool]:
    """Apply to join an org. Returns (request, created).

    A second submission for the same (org, user) pair is a silent no-op that
    returns the already pending request.
    """
    result = await session.execute(
        select(Organization).where(Organization.id == req.organization_id)
    )
    org = result.scalar_one_or_none()
    if not org:
        raise NotFound("Organization not found")

    existing = await _find_request(org.id, caller_id, session)
    if existing:
        log.info(
            "join_request.duplicate_ignored",
            org_id=str(org.id),
            user_id=str(caller_id),
        )
        return existing, False

    values = {
        "id": uuid.uuid4(),
        "org_id": org.id,
        "user_id": caller_id,
        "created_at": datetime.now(timezone.utc),
    }
    dialect = session.get_bind().dialect.name
    conflict_insert = _CONFLICT_INSERTS.get(dialect)
    if conflict_insert is not None:
        # A concurrent submission may have landed since the lookup above.
        stmt = conflict_insert(JoinRequest.__table__).values(**values)
        stmt = stmt.on_conflict_do_nothing(index_elements=["org_id", "user_id"])
        inserted = (await session.execute(stmt)).rowcount
    else:
        session.add(JoinRequest(**values))
        await session.flush()
        inserted = 1

    request = await _find_request(org.id, caller_id, session)
    if not inserted:
        log.info(
            "join_request.duplicate_ignored",
            org_id=str(org.id),
            user_id=str(caller_id),
        )
        return request, False

    log.info(
        "join_request.submitted",
        request_id=str(request.id),
        org_id=str(org.id),
        user_id=str(caller_id),
    )
    return request, True


async def list_join_requests(
    org: Organization, caller_id: uuid.UUID, session: AsyncSession
) -> list[JoinRequest]:
    """Pending requests for the org (owner or Admin)."""
    await authorize(org, caller_id, Action.LIST_JOIN_REQUESTS, session)
    result = await session.execute(
        select(JoinRequest)
        .where(JoinRequest.org_id == org.id)
        .order_by(JoinRequest.created_at)
    )
    return list(result.scalars().all())


async def accept_join_request(
    org: Organization,
    caller_id: uuid.UUID,
    request_id: uuid.UUID,
    session: AsyncSession,
) -> Membership:
    """Accept a request: add the applicant as a Member and consume the request.

    Authorization is evaluated against `org`, the caller's current org
    context, and the membership is created there.
    """
    await authorize(org, caller_id, Action.ACCEPT_JOIN_REQUEST, session)

    result = await session.execute(
        select(JoinRequest).where(JoinRequest.id == request_id)
    )
    request = result.scalar_one_or_none()
    if not request:
        raise NotFound("Request not found")

    if request.org_id != org.id:
        log.warning(
            "join_request.context_mismatch",
            request_id=str(request_id),
            request_org_id=str(request.org_id),
            context_org_id=str(org.id),
        )

    result = await session.execute(
        select(Membership).where(
            Membership.org_id == org.id, Membership.member_id == request.user_id
        )
    )
    membership = result.scalar_one_or_none()
    if membership is None:
        membership = Membership(
            org_id=org.id,
            member_id=request.user_id,
            role=Role.MEMBER.value,
        )
        session.add(membership)

    await session.delete(request)
    await session.flush()

    log.info(
        "join_request.accepted",
        request_id=str(request_id),
        org_id=str(org.id),
        user_id=str(membership.member_id),
        caller=str(caller_id),
    )
    return membership


async def decline_join_request(
    org: Organization,
    caller_id: uuid.UUID,
    request_id: uuid.UUID,
    session: AsyncSession,
) -> int:
    """Discard a request by id. A missing id deletes nothing and is not an error."""
    await authorize(org, caller_id, Action.DECLINE_JOIN_REQUEST, session)

    result = await session.execute(
        delete(JoinRequest).where(JoinRequest.id == request_id)
    )
    await session.flush()

    log.info(
        "join_request.declined",
        request_id=str(request_id),
        org_id=str(org.id),
        caller=str(caller_id),
        removed=result.rowcount,
    )
    return result.rowcount
