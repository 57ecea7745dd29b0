"""Upload passthrough to object storage.

Two backends: the local media directory (served by the static mount in
``main.py``) and a hosted Supabase-style storage bucket reached over HTTP.
"""
import logging
import os
import uuid
from typing import BinaryIO

import requests

from core.config import settings
from core.errors import Conflict, StoreUnavailable, ValidationError

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


def build_key(user_id: str, prefix: str, original_name: str) -> str:
    """Storage key ``<user>/<prefix>-<random><ext>``; only the lowercased extension of the client name survives."""
    ext = os.path.splitext(original_name or "")[1].strip().lower()
    return f"{user_id}/{prefix}-{uuid.uuid4().hex}{ext}"


class LocalStorage:
    def __init__(self, media_dir: str, url_path: str):
        self.media_dir = media_dir
        self.url_path = url_path.rstrip("/")

    def save(self, bucket: str, key: str, fileobj: BinaryIO, content_type: str, base_url: str, max_bytes: int) -> tuple[str, int]:
        file_path = os.path.join(self.media_dir, bucket, *key.split("/"))
        os.makedirs(os.path.dirname(file_path), exist_ok=True)
        if os.path.exists(file_path):
            raise Conflict("Duplicate media")

        # Stream to disk to avoid high memory usage
        size_bytes = 0
        with open(file_path, "wb") as out:
            while True:
                chunk = fileobj.read(CHUNK_SIZE)
                if not chunk:
                    break
                size_bytes += len(chunk)
                if size_bytes > max_bytes:
                    break
                out.write(chunk)
        if size_bytes > max_bytes:
            os.remove(file_path)
            raise ValidationError(f"File is too large. Max size is {max_bytes // (1024 * 1024)}MB")

        url = base_url.rstrip("/") + f"{self.url_path}/{bucket}/{key}"
        return url, size_bytes


class SupabaseStorage:
    def __init__(self, base_url: str, service_key: str, timeout: float):
        self.base_url = base_url.rstrip("/")
        self.service_key = service_key
        self.timeout = timeout

    def public_url(self, bucket: str, key: str) -> str:
        return f"{self.base_url}/storage/v1/object/public/{bucket}/{key}"

    def save(self, bucket: str, key: str, fileobj: BinaryIO, content_type: str, base_url: str, max_bytes: int) -> tuple[str, int]:
        data = fileobj.read(max_bytes + 1)
        if len(data) > max_bytes:
            raise ValidationError(f"File is too large. Max size is {max_bytes // (1024 * 1024)}MB")
        try:
            resp = requests.post(
                f"{self.base_url}/storage/v1/object/{bucket}/{key}",
                data=data,
                headers={
                    "Authorization": f"Bearer {self.service_key}",
                    "Content-Type": content_type,
                    "x-upsert": "false",
                },
                timeout=self.timeout,
            )
        except (requests.Timeout, requests.ConnectionError) as exc:
            logger.error("Storage upload to %s/%s failed: %s", bucket, key, exc)
            raise StoreUnavailable("Object storage did not respond; retry later") from exc

        if resp.status_code == 409:
            raise Conflict("Duplicate media")
        if resp.status_code >= 500:
            logger.error("Storage upload to %s/%s returned %s", bucket, key, resp.status_code)
            raise StoreUnavailable()
        if resp.status_code >= 400:
            raise ValidationError(f"Upload rejected by storage ({resp.status_code})")
        return self.public_url(bucket, key), len(data)


def get_storage():
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseStorage(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY, settings.STORAGE_TIMEOUT_SECONDS)
    return LocalStorage(settings.MEDIA_DIR, settings.MEDIA_URL_PATH)
