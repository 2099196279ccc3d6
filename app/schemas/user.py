from __future__ import annotations

from pydantic import BaseModel, EmailStr


class UserNameRead(BaseModel):
    """Lightweight user representation for display purposes.

    Args:
        id: Unique identifier of the user.
        full_name: Full name if available; used for UI display.
        email: Login email, shown when no name is set.
    """

    id: int
    full_name: str | None = None
    email: EmailStr | None = None

    model_config = {"from_attributes": True}
