from __future__ import annotations

import argparse
import asyncio
import sys
from pathlib import Path
from typing import NoReturn

from dotenv import load_dotenv
from sqlalchemy import select

# Ensure the backend root (parent of this file's directory) is on sys.path
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

load_dotenv(BACKEND_ROOT / ".env")

from db.session import AsyncSessionLocal  # noqa: E402
from app.models.user import User  # noqa: E402
from app.services.auth_service import create_access_token  # noqa: E402


async def _ensure_admin(email: str, full_name: str | None = None) -> None:
    """Create or update an admin user with the given email.

    Args:
        email: Email address of the admin user to upsert.
        full_name: Optional display name for a newly created user.

    Returns:
        None. Commits changes to the database.
    """

    async with AsyncSessionLocal() as session:
        result = await session.execute(select(User).where(User.email == email))
        user: User | None = result.scalar_one_or_none()

        if user is None:
            session.add(User(email=email, full_name=full_name, admin=True))
            await session.commit()
            print(f"Created admin user: {email}")
        elif not user.admin:
            user.admin = True
            await session.commit()
            print(f"Updated user to admin: {email}")
        else:
            print(f"User already admin: {email}")


def main() -> NoReturn:
    """Create/update an admin user and print a bearer token for it."""
    parser = argparse.ArgumentParser(description=main.__doc__)
    parser.add_argument("email")
    parser.add_argument("--name", default=None)
    args = parser.parse_args()

    asyncio.run(_ensure_admin(args.email, args.name))
    print(f"Access token: {create_access_token(args.email)}")
    raise SystemExit(0)


if __name__ == "__main__":
    main()
