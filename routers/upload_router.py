import logging
import os

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile

from core.auth import get_current_actor
from core.config import settings
from core.errors import Unauthorized, ValidationError
from core.lifecycle import Actor
from core.storage import build_key, get_storage
from schemas.upload_schema import UploadKind, UploadResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Upload"])

VIDEO_EXTENSIONS = {".mp4", ".mov", ".avi", ".wmv"}
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif"}

# kind -> (bucket, key prefix, allowed extensions)
UPLOAD_TARGETS = {
    UploadKind.RAW_FOOTAGE: ("raw-footage", "raw", VIDEO_EXTENSIONS | IMAGE_EXTENSIONS),
    UploadKind.EDITED_VIDEO: ("edited-videos", "edit", VIDEO_EXTENSIONS),
}


def _check_uploader(kind: UploadKind, actor: Actor) -> None:
    if kind == UploadKind.RAW_FOOTAGE and not actor.is_creator:
        raise Unauthorized("Only creators upload raw footage")
    if kind == UploadKind.EDITED_VIDEO and not actor.is_editor:
        raise Unauthorized("Only editors upload edited videos")


@router.post("/upload", response_model=UploadResponse, status_code=201)
def upload_media(
    request: Request,
    media: UploadFile = File(...),
    kind: UploadKind = Form(...),
    actor: Actor = Depends(get_current_actor),
):
    """
    Pass a video through to object storage and return its public URL.
    The URL is then set on a project or submitted as a version.
    """
    _check_uploader(kind, actor)
    bucket, prefix, allowed = UPLOAD_TARGETS[kind]

    original_name = media.filename or "file"
    ext = os.path.splitext(original_name)[1].lower()
    if ext not in allowed:
        raise ValidationError(f"Unsupported file type {ext or '(none)'}; allowed: {', '.join(sorted(allowed))}")
    if media.size is not None and media.size > settings.MAX_UPLOAD_BYTES:
        raise ValidationError(f"File is too large. Max size is {settings.MAX_UPLOAD_BYTES // (1024 * 1024)}MB")

    key = build_key(actor.id, prefix, original_name)
    url, size_bytes = get_storage().save(
        bucket,
        key,
        media.file,
        media.content_type or "application/octet-stream",
        str(request.base_url),
        settings.MAX_UPLOAD_BYTES,
    )
    logger.info("Uploaded %s (%s bytes) to %s/%s for %s", original_name, size_bytes, bucket, key, actor.id)
    return UploadResponse(url=url, bucket=bucket, key=key, size_bytes=size_bytes)
