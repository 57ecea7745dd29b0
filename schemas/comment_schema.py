from datetime import datetime
from pydantic import BaseModel, Field


class CommentCreate(BaseModel):
    content: str = Field(min_length=1)
    timestamp: float | None = Field(default=None, ge=0)


class CommentResponse(BaseModel):
    id: str
    project_id: str
    user_id: str
    content: str
    timestamp: float | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
