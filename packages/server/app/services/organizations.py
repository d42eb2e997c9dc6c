"""
Organization service: business logic for org creation, mutation and deletion.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

import structlog
from sqlalchemy import and_, delete, or_
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotFound
from app.models.join_request import JoinRequest
from app.models.membership import Membership
from app.models.organization import Organization
from app.services.authorization import Action, authorize

from orgbase_shared.schemas.common import Role
from orgbase_shared.schemas.organizations import (
    OrgCreateRequest,
    OrgReimageRequest,
    OrgRenameRequest,
)

log = structlog.get_logger()


async def list_user_orgs(
    user_id: uuid.UUID, session: AsyncSession
) -> list[dict]:
    """List all orgs a user owns or belongs to, with their role."""
    result = await session.execute(
        select(Organization, Membership.role)
        .outerjoin(
            Membership,
            and_(
                Membership.org_id == Organization.id,
                Membership.member_id == user_id,
            ),
        )
        .where(or_(Organization.owner_id == user_id, Membership.member_id == user_id))
        .order_by(Organization.created_at)
    )
    rows = result.all()
    return [
        {
            "id": org.id,
            "name": org.name,
            "image": org.image,
            "is_owner": org.owner_id == user_id,
            "role": role,
        }
        for org, role in rows
    ]


async def create_org(
    req: OrgCreateRequest,
    owner_id: uuid.UUID,
    session: AsyncSession,
) -> Organization:
    """Create an org and the owner's Admin membership.

    Both rows are flushed in the caller's transaction; the session's unit of
    work commits or rolls back them together.
    """
    org = Organization(
        name=req.name,
        image=req.image,
        owner_id=owner_id,
    )
    session.add(org)
    await session.flush()

    membership = Membership(
        org_id=org.id,
        member_id=owner_id,
        role=Role.ADMIN.value,
    )
    session.add(membership)
    await session.flush()

    log.info("org.created", org_id=str(org.id), name=org.name, owner=str(owner_id))
    return org


async def get_org(
    org_id: uuid.UUID, caller_id: uuid.UUID, session: AsyncSession
) -> Organization:
    """Get an org the caller owns or belongs to."""
    result = await session.execute(
        select(Organization).where(Organization.id == org_id)
    )
    org = result.scalar_one_or_none()
    if not org:
        raise NotFound("Organization not found")
    await authorize(org, caller_id, Action.VIEW_ORG, session)
    return org


async def rename_org(
    org: Organization,
    caller_id: uuid.UUID,
    req: OrgRenameRequest,
    session: AsyncSession,
) -> Organization:
    """Update the org name (owner or Admin)."""
    await authorize(org, caller_id, Action.RENAME_ORG, session)

    org.name = req.name
    org.updated_at = datetime.now(timezone.utc)
    session.add(org)
    await session.flush()

    log.info("org.renamed", org_id=str(org.id), caller=str(caller_id))
    return org


async def reimage_org(
    org: Organization,
    caller_id: uuid.UUID,
    req: OrgReimageRequest,
    session: AsyncSession,
) -> Organization:
    """Update the org image URL (owner or Admin)."""
    await authorize(org, caller_id, Action.REIMAGE_ORG, session)

    org.image = req.image
    org.updated_at = datetime.now(timezone.utc)
    session.add(org)
    await session.flush()

    log.info("org.reimaged", org_id=str(org.id), caller=str(caller_id))
    return org


async def delete_org(
    org: Organization, caller_id: uuid.UUID, session: AsyncSession
) -> None:
    """Hard-delete the org with its memberships and join requests (owner only)."""
    await authorize(org, caller_id, Action.DELETE_ORG, session)

    org_id = org.id
    requests = await session.execute(
        delete(JoinRequest).where(JoinRequest.org_id == org_id)
    )
    members = await session.execute(
        delete(Membership).where(Membership.org_id == org_id)
    )
    await session.execute(delete(Organization).where(Organization.id == org_id))
    await session.flush()

    log.info(
        "org.deleted",
        org_id=str(org_id),
        caller=str(caller_id),
        memberships_removed=members.rowcount,
        requests_removed=requests.rowcount,
    )
