"""
Organization-related Pydantic schemas shared between the server and its clients.

Covers: org create/rename/re-image requests, org responses and the
per-user org listing.
"""

from __future__ import annotations

import uuid
from datetime import datetime
from typing import Annotated, Optional

from pydantic import AfterValidator, AnyUrl, BaseModel, Field, TypeAdapter

from .common import Role


ORG_NAME_MIN_LENGTH = 3
ORG_NAME_MAX_LENGTH = 50

_url_adapter = TypeAdapter(AnyUrl)


def _check_image_url(value: str) -> str:
    """Reject anything that is not an absolute URL; keep the caller's string as sent."""
    try:
        _url_adapter.validate_python(value)
    except ValueError:
        raise ValueError("Image must be a valid URL") from None
    return value


ImageUrl = Annotated[str, AfterValidator(_check_image_url)]


# ---------------------------------------------------------------------------
# Request schemas
# ---------------------------------------------------------------------------

class OrgCreateRequest(BaseModel):
    name: str = Field(
        ...,
        min_length=ORG_NAME_MIN_LENGTH,
        max_length=ORG_NAME_MAX_LENGTH,
        description="Organization display name",
    )
    image: ImageUrl = Field(..., description="Image URL of the organization")


class OrgRenameRequest(BaseModel):
    name: str = Field(..., min_length=ORG_NAME_MIN_LENGTH, max_length=ORG_NAME_MAX_LENGTH)


class OrgReimageRequest(BaseModel):
    image: ImageUrl


# ---------------------------------------------------------------------------
# Response schemas
# ---------------------------------------------------------------------------

class OrgResponse(BaseModel):
    id: uuid.UUID
    name: str
    image: str
    owner_id: uuid.UUID
    created_at: datetime
    updated_at: datetime

    model_config = {"from_attributes": True}


class OrgListItem(BaseModel):
    id: uuid.UUID
    name: str
    image: str
    is_owner: bool
    role: Optional[Role] = None  # the requesting user's membership role, if any

    model_config = {"from_attributes": True}


class OrgListResponse(BaseModel):
    data: list[OrgListItem]
