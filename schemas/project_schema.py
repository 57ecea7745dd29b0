from datetime import datetime
from typing import Annotated
from pydantic import BaseModel, Field, HttpUrl, StringConstraints, model_validator
from core.lifecycle import ProjectStatus, ReelType, PricingTier

# Length is checked after surrounding whitespace is stripped
Title = Annotated[str, StringConstraints(strip_whitespace=True, min_length=3, max_length=255)]


class ProjectBase(BaseModel):
    title: Title
    description: str | None = Field(default=None, min_length=10)
    raw_footage_url: HttpUrl | None = None
    editing_instructions: str | None = Field(default=None, min_length=10)
    reel_type: ReelType = ReelType.INSTAGRAM
    pricing_tier: PricingTier = PricingTier.BASIC
    custom_price: float | None = Field(default=None, gt=0)
    ai_brief: str | None = None


class ProjectCreate(ProjectBase):
    """Client payload for creating a draft. Creator is inferred from auth."""

    @model_validator(mode="after")
    def _custom_price_matches_tier(self):
        if (self.pricing_tier == PricingTier.CUSTOM) != (self.custom_price is not None):
            raise ValueError("custom_price must be set if and only if pricing_tier is custom")
        return self


class ProjectUpdate(BaseModel):
    title: Title | None = None
    description: str | None = Field(default=None, min_length=10)
    raw_footage_url: HttpUrl | None = None
    editing_instructions: str | None = Field(default=None, min_length=10)
    reel_type: ReelType | None = None
    pricing_tier: PricingTier | None = None
    custom_price: float | None = Field(default=None, gt=0)
    ai_brief: str | None = None


class ProjectResponse(BaseModel):
    id: str
    creator_id: str
    editor_id: str | None = None
    title: str
    description: str | None = None
    raw_footage_url: str | None = None
    editing_instructions: str | None = None
    reel_type: ReelType
    pricing_tier: PricingTier
    custom_price: float | None = None
    ai_brief: str | None = None
    status: ProjectStatus
    created_at: datetime | None = None
    updated_at: datetime | None = None

    model_config = {"from_attributes": True}


class CreatorDashboard(BaseModel):
    projects: list[ProjectResponse]
    counts: dict[str, int]


class EditorStats(BaseModel):
    assigned: int
    in_progress: int
    completed: int


class EditorDashboard(BaseModel):
    assigned: list[ProjectResponse]
    available: list[ProjectResponse]
    stats: EditorStats
