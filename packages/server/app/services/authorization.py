"""
Membership authorizer: effective role and permission decisions.

Every check reads the caller's membership row fresh; privilege can change
between calls, so nothing here is cached.
"""

from __future__ import annotations

import uuid
from dataclasses import dataclass
from enum import Enum

import structlog
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.errors import NotAuthorized
from app.models.membership import Membership
from app.models.organization import Organization

from orgbase_shared.schemas.common import Role

log = structlog.get_logger()


class Action(str, Enum):
    VIEW_ORG = "view_org"
    RENAME_ORG = "rename_org"
    REIMAGE_ORG = "reimage_org"
    DELETE_ORG = "delete_org"
    LIST_JOIN_REQUESTS = "list_join_requests"
    ACCEPT_JOIN_REQUEST = "accept_join_request"
    DECLINE_JOIN_REQUEST = "decline_join_request"
    PROMOTE_TO_ADMIN = "promote_to_admin"
    SET_MEMBER_ROLE = "set_member_role"
    REMOVE_MEMBER = "remove_member"
    LIST_MEMBERS = "list_members"


class Capability(str, Enum):
    ANY_MEMBER = "any_member"
    PRIVILEGED = "privileged"
    OWNER = "owner"


ACTION_REQUIREMENTS: dict[Action, Capability] = {
    Action.VIEW_ORG: Capability.ANY_MEMBER,
    Action.LIST_MEMBERS: Capability.ANY_MEMBER,
    Action.RENAME_ORG: Capability.PRIVILEGED,
    Action.REIMAGE_ORG: Capability.PRIVILEGED,
    Action.LIST_JOIN_REQUESTS: Capability.PRIVILEGED,
    Action.ACCEPT_JOIN_REQUEST: Capability.PRIVILEGED,
    Action.DECLINE_JOIN_REQUEST: Capability.PRIVILEGED,
    Action.SET_MEMBER_ROLE: Capability.PRIVILEGED,
    Action.REMOVE_MEMBER: Capability.PRIVILEGED,
    Action.DELETE_ORG: Capability.OWNER,
    # Admins cannot mint other admins.
    Action.PROMOTE_TO_ADMIN: Capability.OWNER,
}


@dataclass(frozen=True)
class EffectiveRole:
    is_owner: bool = False
    is_admin: bool = False
    is_member: bool = False

    @property
    def is_privileged(self) -> bool:
        return self.is_owner or self.is_admin

    def allows(self, action: Action) -> bool:
        required = ACTION_REQUIREMENTS[action]
        if required is Capability.OWNER:
            return self.is_owner
        if required is Capability.PRIVILEGED:
            return self.is_privileged
        return self.is_owner or self.is_member


async def effective_role(
    org: Organization, caller_id: uuid.UUID, session: AsyncSession
) -> EffectiveRole:
    """Derive the caller's standing in `org` from the current rows."""
    result = await session.execute(
        select(Membership).where(
            Membership.org_id == org.id, Membership.member_id == caller_id
        )
    )
    membership = result.scalar_one_or_none()
    return EffectiveRole(
        is_owner=org.owner_id == caller_id,
        is_admin=membership is not None and membership.role == Role.ADMIN.value,
        is_member=membership is not None,
    )


async def authorize(
    org: Organization,
    caller_id: uuid.UUID,
    action: Action,
    session: AsyncSession,
) -> EffectiveRole:
    """Return the caller's effective role, or raise NotAuthorized."""
    role = await effective_role(org, caller_id, session)
    if not role.allows(action):
        log.info(
            "authz.denied",
            org_id=str(org.id),
            caller=str(caller_id),
            action=action.value,
        )
        required = ACTION_REQUIREMENTS[action]
        if required is Capability.OWNER:
            raise NotAuthorized("You are not the owner of this organization")
        if required is Capability.ANY_MEMBER:
            raise NotAuthorized("You are not a member of this organization")
        raise NotAuthorized("You are not an admin of this organization")
    return role
