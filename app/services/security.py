from __future__ import annotations

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.user import User
from app.services.auth_service import decode_token
from db.session import get_db


_bearer = HTTPBearer(auto_error=False)


def _unauthorized() -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        headers={"WWW-Authenticate": "Bearer"},
    )


async def get_current_user(
    db: AsyncSession = Depends(get_db),
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> User:
    """Resolve the caller from a Bearer JWT whose subject is a user email.

    Raises:
        HTTPException: 401 when the token is missing, invalid, expired or
            names an unknown user.
    """

    if creds is None or creds.scheme.lower() != "bearer":
        raise _unauthorized()
    try:
        claims = decode_token(creds.credentials)
    except Exception:
        raise _unauthorized()

    email = claims.get("sub")
    if not email:
        raise _unauthorized()

    user = (
        await db.execute(select(User).where(User.email == email))
    ).scalar_one_or_none()
    if user is None:
        raise _unauthorized()
    return user


async def require_admin(current_user: User = Depends(get_current_user)) -> User:
    """Admin principal gate for seeding and audit endpoints (403 otherwise)."""

    if not current_user.admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN)
    return current_user
