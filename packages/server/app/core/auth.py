"""
Identity and organization-context resolution.

Supports:
- Session JWTs carried in the session cookie or an `Authorization: Bearer` header
- Redis revocation list (revoked sessions fail closed)
- Current-organization context for org-scoped routes

Tokens are issued upstream; `create_jwt` exists for local tooling and tests.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timedelta, timezone
from typing import Optional

import jwt
import structlog
from fastapi import Depends, HTTPException, Request
from fastapi.security import APIKeyHeader
from sqlalchemy.ext.asyncio import AsyncSession
from sqlmodel import select

from app.core.config import get_settings
from app.core.database import get_session
from app.core.errors import NotFound
from app.core.redis import get_redis
from app.models.membership import Membership
from app.models.organization import Organization

log = structlog.get_logger()
settings = get_settings()

authorization_header = APIKeyHeader(name="Authorization", auto_error=False)


# ---------------------------------------------------------------------------
# JWT
# ---------------------------------------------------------------------------

def create_jwt(
    user_id: uuid.UUID,
    *,
    expires_delta: timedelta | None = None,
) -> tuple[str, str]:
    """Create a signed session JWT. Returns (token, jti)."""
    jti = str(uuid.uuid4())
    now = datetime.now(timezone.utc)
    exp = now + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    payload = {
        "sub": str(user_id),
        "iat": now,
        "exp": exp,
        "jti": jti,
    }
    token = jwt.encode(payload, settings.secret_key, algorithm=settings.jwt_algorithm)
    return token, jti


def decode_jwt(token: str) -> dict:
    """Decode and verify a JWT. Raises jwt.PyJWTError on failure."""
    return jwt.decode(token, settings.secret_key, algorithms=[settings.jwt_algorithm])


async def is_jwt_revoked(jti: str) -> bool:
    """Check if a JWT ID has been revoked."""
    redis = await get_redis()
    return await redis.exists(f"jwt:revoked:{jti}") > 0


# ---------------------------------------------------------------------------
# Identity
# ---------------------------------------------------------------------------

def _extract_token(request: Request, authorization: Optional[str]) -> Optional[str]:
    if authorization and authorization.startswith("Bearer "):
        return authorization[7:].strip() or None
    return request.cookies.get(settings.session_cookie_name)


async def get_caller_id(
    request: Request,
    authorization: Optional[str] = Depends(authorization_header),
) -> uuid.UUID:
    """Resolve the authenticated caller. Any missing or invalid session is a 401."""
    token = _extract_token(request, authorization)
    if not token:
        raise HTTPException(status_code=401, detail="Authentication required")

    try:
        payload = decode_jwt(token)
        user_id = uuid.UUID(payload["sub"])
    except (jwt.PyJWTError, KeyError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired session")

    jti = payload.get("jti")
    if jti and await is_jwt_revoked(jti):
        raise HTTPException(status_code=401, detail="Session has been revoked")

    return user_id


# ---------------------------------------------------------------------------
# Organization context
# ---------------------------------------------------------------------------

class OrgContext:
    """The caller plus the organization they are currently acting in."""

    def __init__(
        self,
        caller_id: uuid.UUID,
        org: Organization,
        membership: Optional[Membership],
    ):
        self.caller_id = caller_id
        self.org = org
        self.membership = membership
        self.org_id = org.id


async def resolve_org_context(
    org_id: uuid.UUID, caller_id: uuid.UUID, session: AsyncSession
) -> OrgContext:
    """Load the org and the caller's membership; outsiders get a 404."""
    result = await session.execute(
        select(Organization).where(Organization.id == org_id)
    )
    org = result.scalar_one_or_none()
    if not org:
        raise NotFound("Organization not found")

    result = await session.execute(
        select(Membership).where(
            Membership.org_id == org.id, Membership.member_id == caller_id
        )
    )
    membership = result.scalar_one_or_none()
    if membership is None and org.owner_id != caller_id:
        log.info("org_context.outsider", org_id=str(org.id), caller=str(caller_id))
        raise NotFound("Organization not found")

    return OrgContext(caller_id=caller_id, org=org, membership=membership)


async def get_org_context(
    orgId: uuid.UUID,
    caller_id: uuid.UUID = Depends(get_caller_id),
    session: AsyncSession = Depends(get_session),
) -> OrgContext:
    """Dependency for org-scoped routes."""
    return await resolve_org_context(orgId, caller_id, session)
