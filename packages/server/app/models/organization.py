"""Organization model."""

import uuid

from sqlmodel import Field, SQLModel

from .base import TimestampMixin, UUIDMixin


class Organization(UUIDMixin, TimestampMixin, SQLModel, table=True):
    __tablename__ = "organizations"

    name: str = Field(nullable=False, index=True, max_length=50)
    image: str = Field(nullable=False)
    # Fixed at creation; ownership is never transferred.
    owner_id: uuid.UUID = Field(foreign_key="users.id", nullable=False, index=True)
