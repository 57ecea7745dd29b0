from datetime import datetime
from pydantic import BaseModel
from core.lifecycle import Role


class ProfileCreate(BaseModel):
    role: Role
    bio: str | None = None
    skillset: list[str] | None = None
    portfolio_urls: list[str] | None = None


class ProfileUpdate(BaseModel):
    """Role is not editable."""

    bio: str | None = None
    skillset: list[str] | None = None
    portfolio_urls: list[str] | None = None
    preferences: dict | None = None


class ProfileResponse(BaseModel):
    id: str
    role: Role
    bio: str | None = None
    skillset: list[str] | None = None
    portfolio_urls: list[str] | None = None
    preferences: dict | None = None
    average_rating: float | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}
