"""
Tests for the membership roster.

Tests cover:
- Role changes: only the owner promotes to Admin, privileged callers demote
- Member removal by privileged callers
- The permissive gaps that are kept (self-demotion, removing the owner's row)
"""

from __future__ import annotations

import uuid

import pytest
from pydantic import ValidationError

from app.core.errors import NotAuthorized
from app.models.membership import Membership
from app.models.organization import Organization
from app.services import members as member_service

from orgbase_shared.schemas.common import Role
from orgbase_shared.schemas.members import MemberRoleUpdateRequest


async def _role(session_factory, org_id, user_id):
    async with session_factory() as s:
        row = await s.get(Membership, (org_id, user_id))
        return row.role if row else None


class TestRoleUpdateValidation:
    def test_accepts_known_roles(self):
        req = MemberRoleUpdateRequest(member_id=uuid.uuid4(), role="Admin")
        assert req.role is Role.ADMIN

    def test_rejects_owner_role(self):
        with pytest.raises(ValidationError):
            MemberRoleUpdateRequest(member_id=uuid.uuid4(), role="Owner")

    def test_rejects_bad_member_id(self):
        with pytest.raises(ValidationError):
            MemberRoleUpdateRequest(member_id="someone", role="Member")


class TestChangeRole:
    @pytest.mark.asyncio
    async def test_owner_promotes(self, session_factory, org_id, owner_id, member_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            info = await member_service.change_member_role(
                org, owner_id, MemberRoleUpdateRequest(member_id=member_id, role=Role.ADMIN), s
            )
            await s.commit()
        assert info["role"] == "Admin"
        assert await _role(session_factory, org_id, member_id) == "Admin"

    @pytest.mark.asyncio
    async def test_admin_cannot_promote(self, session_factory, org_id, admin_id, member_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            with pytest.raises(NotAuthorized) as exc_info:
                await member_service.change_member_role(
                    org, admin_id, MemberRoleUpdateRequest(member_id=member_id, role=Role.ADMIN), s
                )
            await s.commit()
        assert "owner" in exc_info.value.detail
        assert await _role(session_factory, org_id, member_id) == "Member"

    @pytest.mark.asyncio
    async def test_admin_demotes(self, session_factory, org_id, owner_id, admin_id, member_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            await member_service.change_member_role(
                org, owner_id, MemberRoleUpdateRequest(member_id=member_id, role=Role.ADMIN), s
            )
            await member_service.change_member_role(
                org, admin_id, MemberRoleUpdateRequest(member_id=member_id, role=Role.MEMBER), s
            )
            await s.commit()
        assert await _role(session_factory, org_id, member_id) == "Member"

    @pytest.mark.asyncio
    async def test_member_cannot_change_roles(self, session, org_id, member_id, admin_id):
        org = await session.get(Organization, org_id)
        for role in (Role.ADMIN, Role.MEMBER):
            with pytest.raises(NotAuthorized):
                await member_service.change_member_role(
                    org, member_id, MemberRoleUpdateRequest(member_id=admin_id, role=role), session
                )

    @pytest.mark.asyncio
    async def test_admin_may_demote_self(self, session_factory, org_id, admin_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            await member_service.change_member_role(
                org, admin_id, MemberRoleUpdateRequest(member_id=admin_id, role=Role.MEMBER), s
            )
            await s.commit()
        assert await _role(session_factory, org_id, admin_id) == "Member"

    @pytest.mark.asyncio
    async def test_unknown_member_changes_nothing(self, session, org_id, owner_id):
        org = await session.get(Organization, org_id)
        info = await member_service.change_member_role(
            org, owner_id, MemberRoleUpdateRequest(member_id=uuid.uuid4(), role=Role.MEMBER), session
        )
        assert info is None


class TestRemoveMember:
    @pytest.mark.asyncio
    async def test_admin_removes_member(self, session_factory, org_id, admin_id, member_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            removed = await member_service.remove_member(org, admin_id, member_id, s)
            await s.commit()
        assert removed == 1
        assert await _role(session_factory, org_id, member_id) is None

    @pytest.mark.asyncio
    async def test_member_cannot_remove(self, session_factory, org_id, member_id, admin_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            with pytest.raises(NotAuthorized):
                await member_service.remove_member(org, member_id, admin_id, s)
        assert await _role(session_factory, org_id, admin_id) == "Admin"

    @pytest.mark.asyncio
    async def test_owner_row_can_be_removed(self, session_factory, org_id, owner_id, admin_id):
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            await member_service.remove_member(org, admin_id, owner_id, s)
            await s.commit()
        assert await _role(session_factory, org_id, owner_id) is None

        # Ownership comes from the org row, so the owner keeps full control.
        async with session_factory() as s:
            org = await s.get(Organization, org_id)
            await member_service.remove_member(org, owner_id, admin_id, s)
            await s.commit()
        assert await _role(session_factory, org_id, admin_id) is None

    @pytest.mark.asyncio
    async def test_unknown_member_removes_nothing(self, session, org_id, owner_id):
        org = await session.get(Organization, org_id)
        assert await member_service.remove_member(org, owner_id, uuid.uuid4(), session) == 0


class TestListMembers:
    @pytest.mark.asyncio
    async def test_member_lists_roster(self, session, org_id, owner_id, admin_id, member_id):
        org = await session.get(Organization, org_id)
        roster = await member_service.list_members(org, member_id, session)
        by_id = {m["member_id"]: m for m in roster}
        assert set(by_id) == {owner_id, admin_id, member_id}
        assert by_id[owner_id]["is_owner"]
        assert by_id[admin_id]["role"] == "Admin"
        assert by_id[member_id]["name"] == "member"

    @pytest.mark.asyncio
    async def test_outsider_cannot_list(self, session, org_id, outsider_id):
        org = await session.get(Organization, org_id)
        with pytest.raises(NotAuthorized):
            await member_service.list_members(org, outsider_id, session)
