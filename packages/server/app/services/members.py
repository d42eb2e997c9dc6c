"""
Roster service: list members, change roles, remove members.
"""

from __future__ import annotations

import uuid
from typing import Optional

import structlog
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.models.membership import Membership
from app.models.organization import Organization
from app.models.user import User
from app.services.authorization import Action, authorize

from orgbase_shared.schemas.common import Role
from orgbase_shared.schemas.members import MemberRoleUpdateRequest

log = structlog.get_logger()


def _member_info(org: Organization, membership: Membership, user: Optional[User]) -> dict:
    return {
        "org_id": membership.org_id,
        "member_id": membership.member_id,
        "role": membership.role,
        "is_owner": org.owner_id == membership.member_id,
        "name": user.name if user else None,
        "email": user.email if user else None,
        "created_at": membership.created_at,
    }


async def list_members(
    org: Organization, caller_id: uuid.UUID, session: AsyncSession
) -> list[dict]:
    """List the org's memberships with profile info."""
    await authorize(org, caller_id, Action.LIST_MEMBERS, session)
    result = await session.execute(
        select(Membership, User)
        .outerjoin(User, User.id == Membership.member_id)
        .where(Membership.org_id == org.id)
        .order_by(Membership.created_at)
    )
    return [_member_info(org, membership, user) for membership, user in result.all()]


async def change_member_role(
    org: Organization,
    caller_id: uuid.UUID,
    req: MemberRoleUpdateRequest,
    session: AsyncSession,
) -> Optional[dict]:
    """Set a member's role. Promotion to Admin is reserved for the owner.

    Returns the updated member, or None when the target holds no membership
    in the org (nothing is changed).
    """
    action = Action.PROMOTE_TO_ADMIN if req.role == Role.ADMIN else Action.SET_MEMBER_ROLE
    await authorize(org, caller_id, action, session)

    result = await session.execute(
        select(Membership).where(
            Membership.org_id == org.id, Membership.member_id == req.member_id
        )
    )
    membership = result.scalar_one_or_none()
    if membership is None:
        log.info(
            "member.role_change_no_target",
            org_id=str(org.id),
            member_id=str(req.member_id),
        )
        return None

    previous = membership.role
    membership.role = req.role.value
    session.add(membership)
    await session.flush()

    log.info(
        "member.role_changed",
        org_id=str(org.id),
        member_id=str(req.member_id),
        previous=previous,
        role=membership.role,
        caller=str(caller_id),
    )
    return _member_info(org, membership, None)


async def remove_member(
    org: Organization,
    caller_id: uuid.UUID,
    user_id: uuid.UUID,
    session: AsyncSession,
) -> int:
    """Delete the (org, user) membership. Returns the number of rows removed."""
    await authorize(org, caller_id, Action.REMOVE_MEMBER, session)

    result = await session.execute(
        delete(Membership).where(
            Membership.org_id == org.id, Membership.member_id == user_id
        )
    )
    await session.flush()

    log.info(
        "member.removed",
        org_id=str(org.id),
        member_id=str(user_id),
        caller=str(caller_id),
        removed=result.rowcount,
    )
    return result.rowcount
