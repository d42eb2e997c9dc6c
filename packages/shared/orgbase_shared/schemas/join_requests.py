"""Join-request schemas."""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import List

from pydantic import BaseModel, Field

from .common import JoinRequestState


class JoinRequestCreate(BaseModel):
    """Apply to join an organization."""
    organization_id: uuid.UUID


class JoinRequestResponse(BaseModel):
    id: uuid.UUID
    org_id: uuid.UUID
    user_id: uuid.UUID
    state: JoinRequestState = JoinRequestState.PENDING
    created_at: datetime

    model_config = {"from_attributes": True}


class JoinRequestSubmitResponse(BaseModel):
    """Submission result. `created` is False when a pending request already existed."""
    request: JoinRequestResponse
    created: bool = Field(default=True)


class JoinRequestListResponse(BaseModel):
    data: List[JoinRequestResponse]
