"""
Promote an existing user to admin.

The user must have signed in at least once so the local users row exists.
A profile is created for them if they never filled one in.

Usage:
    python scripts/users/create_admin.py someone@example.com
    ENV_FILE=.env.dev python scripts/users/create_admin.py <user-id>
"""

import asyncio
import os
import sys
from pathlib import Path

from dotenv import load_dotenv

# Load env file before importing libs that use get_settings()
project_root = Path(__file__).resolve().parents[2]
sys.path.append(str(project_root))
env_file = os.environ.get("ENV_FILE", ".env")
load_dotenv(project_root / env_file, override=True)

from libs.db.config import AsyncSessionLocal  # noqa: E402
from services.aid_service.errors import NotFoundError  # noqa: E402
from services.aid_service.models import User, UserRole  # noqa: E402
from services.aid_service.services import storage  # noqa: E402
from sqlalchemy import or_, select  # noqa: E402


async def create_admin(identifier: str) -> int:
    async with AsyncSessionLocal() as session:
        result = await session.execute(
            select(User).where(or_(User.id == identifier, User.email == identifier))
        )
        user = result.scalars().first()
        if user is None:
            print(f"❌ No user matches {identifier}. Sign in once, then retry.")
            return 1

        try:
            await storage.set_profile_role(session, user.id, UserRole.ADMIN)
            print(f"✅ Existing profile of {user.email or user.id} set to admin.")
        except NotFoundError:
            await storage.create_profile(
                session,
                user_id=user.id,
                full_name=user.full_name or user.email or user.id,
                role=UserRole.ADMIN,
            )
            print(f"✅ Created admin profile for {user.email or user.id}.")
    return 0


if __name__ == "__main__":
    if len(sys.argv) != 2:
        print(__doc__)
        sys.exit(2)
    sys.exit(asyncio.run(create_admin(sys.argv[1])))
