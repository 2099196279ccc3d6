from types import SimpleNamespace

import pytest
from fastapi import HTTPException
from fastapi.security import HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.services.auth_service import create_access_token, decode_token
from app.services.security import get_current_user, require_admin


def test_access_token_round_trip():
    # Act
    claims = decode_token(create_access_token("admin@example.com", {"admin": True}))

    # Assert
    assert claims["sub"] == "admin@example.com"
    assert claims["admin"] is True
    assert "exp" in claims


@pytest.mark.asyncio
async def test_get_current_user_resolves_subject(mocker):
    # Arrange
    user = SimpleNamespace(email="admin@example.com", admin=True)
    db = mocker.create_autospec(AsyncSession, instance=True)
    db.execute = mocker.AsyncMock(
        return_value=SimpleNamespace(scalar_one_or_none=lambda: user)
    )
    creds = HTTPAuthorizationCredentials(
        scheme="Bearer", credentials=create_access_token("admin@example.com")
    )

    # Act
    resolved = await get_current_user(db=db, creds=creds)

    # Assert
    assert resolved is user


@pytest.mark.asyncio
async def test_get_current_user_rejects_invalid_token(mocker):
    # Arrange
    db = mocker.create_autospec(AsyncSession, instance=True)
    creds = HTTPAuthorizationCredentials(scheme="Bearer", credentials="not-a-jwt")

    # Act
    with pytest.raises(HTTPException) as excinfo:
        await get_current_user(db=db, creds=creds)

    # Assert
    assert excinfo.value.status_code == 401


@pytest.mark.asyncio
async def test_require_admin_allows_admin():
    # Arrange
    user = SimpleNamespace(admin=True)

    # Act / Assert
    assert await require_admin(current_user=user) is user


@pytest.mark.asyncio
async def test_require_admin_denies_non_admin():
    # Act
    with pytest.raises(HTTPException) as excinfo:
        await require_admin(current_user=SimpleNamespace(admin=False))

    # Assert
    assert excinfo.value.status_code == 403
