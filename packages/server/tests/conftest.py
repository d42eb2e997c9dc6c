"""
Shared fixtures: in-memory SQLite for fast tests.
"""

from __future__ import annotations

import os

os.environ.setdefault("ORGBASE_DATABASE_URL", "sqlite+aiosqlite://")

import uuid
from unittest.mock import AsyncMock, patch

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

import app.models  # noqa: F401
from app.core.auth import create_jwt
from app.models.membership import Membership
from app.models.user import User
from app.services.organizations import create_org

from orgbase_shared.schemas.organizations import OrgCreateRequest

ACME_IMAGE = "https://cdn.example.com/acme.png"


@pytest.fixture
async def engine():
    eng = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with eng.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield eng
    await eng.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def session(session_factory):
    async with session_factory() as s:
        yield s


@pytest.fixture
def make_user(session_factory):
    async def _make(name: str = "user") -> uuid.UUID:
        async with session_factory() as s:
            user = User(email=f"{name}-{uuid.uuid4().hex[:8]}@example.com", name=name)
            s.add(user)
            await s.commit()
            return user.id

    return _make


@pytest.fixture
async def owner_id(make_user):
    return await make_user("owner")


@pytest.fixture
async def admin_id(make_user):
    return await make_user("admin")


@pytest.fixture
async def member_id(make_user):
    return await make_user("member")


@pytest.fixture
async def outsider_id(make_user):
    return await make_user("outsider")


@pytest.fixture
async def org_id(session_factory, owner_id, admin_id, member_id) -> uuid.UUID:
    """'Acme', owned by `owner_id`, with one Admin and one Member."""
    async with session_factory() as s:
        org = await create_org(
            OrgCreateRequest(name="Acme", image=ACME_IMAGE), owner_id, s
        )
        s.add(Membership(org_id=org.id, member_id=admin_id, role="Admin"))
        s.add(Membership(org_id=org.id, member_id=member_id, role="Member"))
        await s.commit()
        return org.id


# ---------------------------------------------------------------------------
# HTTP client
# ---------------------------------------------------------------------------

@pytest.fixture
def auth_headers():
    """Build Bearer session headers for a user id."""
    def _headers(user_id: uuid.UUID) -> dict[str, str]:
        token, _ = create_jwt(user_id)
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
async def client(session_factory):
    from app.core.database import get_session
    from app.main import app

    async def _get_session():
        async with session_factory() as s:
            try:
                yield s
                await s.commit()
            except Exception:
                await s.rollback()
                raise

    app.dependency_overrides[get_session] = _get_session
    with patch("app.core.auth.is_jwt_revoked", AsyncMock(return_value=False)):
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    app.dependency_overrides.clear()
