import enum
from pydantic import BaseModel


class UploadKind(str, enum.Enum):
    RAW_FOOTAGE = "raw_footage"
    EDITED_VIDEO = "edited_video"


class UploadResponse(BaseModel):
    url: str
    bucket: str
    key: str
    size_bytes: int
