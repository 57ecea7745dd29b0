from datetime import datetime
from pydantic import BaseModel, HttpUrl


class VersionCreate(BaseModel):
    video_url: HttpUrl
    editor_notes: str | None = None


class VersionResponse(BaseModel):
    id: str
    project_id: str
    version_number: int
    video_url: str
    editor_notes: str | None = None
    created_at: datetime | None = None

    model_config = {"from_attributes": True}
