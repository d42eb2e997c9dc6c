"""Pending request from a non-member to join an organization."""

from datetime import datetime
import uuid

import sqlalchemy as sa
from sqlmodel import Field, SQLModel

from .base import UUIDMixin, _utcnow


class JoinRequest(UUIDMixin, SQLModel, table=True):
    __tablename__ = "join_requests"
    __table_args__ = (
        sa.UniqueConstraint("org_id", "user_id", name="uq_join_requests_org_user"),
    )

    org_id: uuid.UUID = Field(
        foreign_key="organizations.id", nullable=False, index=True, ondelete="CASCADE"
    )
    user_id: uuid.UUID = Field(foreign_key="users.id", nullable=False)
    created_at: datetime = Field(
        default_factory=_utcnow,
        nullable=False,
        sa_type=sa.DateTime(timezone=True),
    )
