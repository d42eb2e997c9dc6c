"""Membership roster schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Optional, List

from pydantic import BaseModel

from .common import Role


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class MemberRoleUpdateRequest(BaseModel):
    """Change a member's role within the current org."""
    member_id: uuid.UUID
    role: Role


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class MemberResponse(BaseModel):
    """Single membership row, joined with the user's profile when available."""
    org_id: uuid.UUID
    member_id: uuid.UUID
    role: Role
    is_owner: bool = False
    name: Optional[str] = None
    email: Optional[str] = None
    created_at: datetime


class MemberListResponse(BaseModel):
    data: List[MemberResponse]
