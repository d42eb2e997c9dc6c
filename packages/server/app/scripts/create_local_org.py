"""
Script to create a local user and an organization they own, for local testing.

Prints a development session token for the user.
"""

import asyncio
import argparse

import structlog
from sqlmodel import select

from app.core.auth import create_jwt
from app.core.config import get_settings
from app.core.database import get_session_context, init_db
from app.core.logging_config import configure_logging
from app.models.user import User
from app.services.organizations import create_org
from orgbase_shared.schemas.organizations import OrgCreateRequest

settings = get_settings()
log = structlog.get_logger()


async def create_local_org(email: str, org_name: str, image: str) -> None:
    req = OrgCreateRequest(name=org_name, image=image)
    await init_db()

    async with get_session_context() as session:
        result = await session.execute(select(User).where(User.email == email))
        user = result.scalar_one_or_none()
        if not user:
            user = User(email=email, name=email.split("@")[0])
            session.add(user)
            await session.flush()
            log.info("user.created", user_id=str(user.id), email=email)
        else:
            log.info("user.exists", user_id=str(user.id), email=email)

        org = await create_org(req, user.id, session)

    token, _ = create_jwt(user.id)
    print(f"Organization: {org.name} ({org.id})")
    print(f"Session token for {email}: {token}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Create a local user and organization.")
    parser.add_argument("--email", required=True, help="Email address for the owner")
    parser.add_argument("--name", required=True, help="Organization name (3-50 characters)")
    parser.add_argument(
        "--image",
        default="https://placehold.co/128x128.png",
        help="Organization image URL",
    )

    args = parser.parse_args()

    configure_logging(settings.log_level, "text")
    asyncio.run(create_local_org(args.email, args.name, args.image))
