from __future__ import annotations

from pydantic import BaseModel, Field, field_validator


class SeedCityRequest(BaseModel):
    city_name: str = Field(min_length=1, max_length=255)

    @field_validator("city_name")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("City name is required")
        return value


class SeedCityResponse(BaseModel):
    """Outcome of a seeding run, including the full run log for the admin UI."""

    success: bool = True
    message: str
    city_id: int
    city_name: str
    destinations_created: int
    logs: list[str]


class SeedRateLimitedResponse(BaseModel):
    success: bool = False
    error: str
    reset_time: str | None = None
    wait_minutes: int
