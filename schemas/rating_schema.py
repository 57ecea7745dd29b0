from datetime import datetime
from pydantic import BaseModel, Field


class RatingCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    review: str | None = None


class RatingResponse(BaseModel):
    id: str
    project_id: str
    editor_id: str
    rating: int
    review: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
