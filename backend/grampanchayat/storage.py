"""Object storage for uploaded images and documents.

Two backends share one small surface (`upload`, `public_url`, `remove`):

- `SupabaseStorage` talks to the Supabase Storage REST API with httpx,
  authenticating with the project's service key;
- `LocalStorage` writes under a directory that the app serves at
  `/files/<bucket>/...`, for development and tests.

Both produce public URLs containing `<bucket>/<object path>`, so
`object_path` can turn a stored URL back into the path to delete.
Deletes are best-effort: callers use `delete_file`, which logs and
swallows storage errors because the database row is already gone.
"""

from __future__ import annotations

import logging
import uuid
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional

import httpx

from .config import settings

logger = logging.getLogger("grampanchayat.storage")


class StorageError(Exception):
    """Raised when the storage service rejects or fails a request."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


@dataclass
class StoredFile:
    file_name: str
    path: str
    public_url: str
    content_type: str
    size: int
    category: str


class SupabaseStorage:
    """Thin client for one Supabase Storage bucket."""

    def __init__(self, url: str, service_key: str, bucket: str, timeout: float = 30.0,
                 client: Optional[httpx.Client] = None):
        self.url = url.rstrip("/")
        self.bucket = bucket
        self._client = client or httpx.Client(timeout=timeout)
        self._headers = {"Authorization": f"Bearer {service_key}", "apikey": service_key}

    def _raise_for(self, resp: httpx.Response, action: str) -> None:
        if resp.is_success:
            return
        try:
            message = resp.json().get("message") or resp.text
        except ValueError:
            message = resp.text
        raise StorageError(f"{action} failed: {message}", status_code=resp.status_code)

    def upload(self, path: str, data: bytes, content_type: str, upsert: bool = False) -> None:
        headers = {
            **self._headers,
            "Content-Type": content_type,
            "x-upsert": "true" if upsert else "false",
        }
        try:
            resp = self._client.post(f"{self.url}/storage/v1/object/{self.bucket}/{path}", content=data, headers=headers)
        except httpx.HTTPError as exc:
            raise StorageError(f"upload failed: {exc}") from exc
        self._raise_for(resp, "upload")

    def public_url(self, path: str) -> str:
        return f"{self.url}/storage/v1/object/public/{self.bucket}/{path}"

    def remove(self, paths: List[str]) -> None:
        try:
            resp = self._client.request(
                "DELETE",
                f"{self.url}/storage/v1/object/{self.bucket}",
                json={"prefixes": paths},
                headers=self._headers,
            )
        except httpx.HTTPError as exc:
            raise StorageError(f"remove failed: {exc}") from exc
        self._raise_for(resp, "remove")

    def ensure_bucket(self, public: bool = True, file_size_limit: Optional[int] = None,
                      allowed_mime_types: Optional[Iterable[str]] = None) -> bool:
        """Create the bucket, or make an existing one public.

        Returns True when the bucket had to be created.
        """
        resp = self._client.get(f"{self.url}/storage/v1/bucket/{self.bucket}", headers=self._headers)
        if resp.is_success:
            resp = self._client.put(
                f"{self.url}/storage/v1/bucket/{self.bucket}",
                json={"id": self.bucket, "public": public},
                headers=self._headers,
            )
            self._raise_for(resp, "update bucket")
            return False
        body = {"id": self.bucket, "name": self.bucket, "public": public}
        if file_size_limit:
            body["file_size_limit"] = file_size_limit
        if allowed_mime_types:
            body["allowed_mime_types"] = list(allowed_mime_types)
        resp = self._client.post(f"{self.url}/storage/v1/bucket", json=body, headers=self._headers)
        self._raise_for(resp, "create bucket")
        return True


class LocalStorage:
    """Filesystem-backed bucket served by the app under `base_url`."""

    def __init__(self, root: str, bucket: str, base_url: str = "/files"):
        self.root = Path(root).expanduser().resolve()
        self.bucket = bucket
        self.base_url = base_url.rstrip("/")

    def _resolve(self, path: str) -> Path:
        target = (self.root / path).resolve()
        if self.root not in target.parents:
            raise StorageError(f"invalid object path: {path}")
        return target

    def upload(self, path: str, data: bytes, content_type: str, upsert: bool = False) -> None:
        target = self._resolve(path)
        if target.exists() and not upsert:
            raise StorageError(f"object already exists: {path}", status_code=409)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_bytes(data)

    def public_url(self, path: str) -> str:
        return f"{self.base_url}/{self.bucket}/{path}"

    def remove(self, paths: List[str]) -> None:
        for path in paths:
            target = self._resolve(path)
            if target.exists():
                target.unlink()


def object_path(value: str, bucket: str) -> str:
    """Return the object path for a stored path or full public URL."""
    if value.startswith(f"{bucket}/"):
        return value[len(bucket) + 1:]
    _, marker, rest = value.partition(f"/{bucket}/")
    return rest if marker else value


def build_object_path(filename: str, category: str) -> str:
    ext = PurePosixPath(filename).suffix.lower()
    return f"{category}/{uuid.uuid4()}{ext}"


def upload_file(storage, filename: str, data: bytes, content_type: str, category: str = "general") -> StoredFile:
    """Store `data` under `<category>/<uuid><ext>` and describe the result."""
    path = build_object_path(filename, category)
    storage.upload(path, data, content_type)
    stored = StoredFile(
        file_name=filename,
        path=path,
        public_url=storage.public_url(path),
        content_type=content_type,
        size=len(data),
        category=category,
    )
    logger.info("stored %s (%d bytes) at %s", filename, stored.size, path)
    return stored


def delete_file(storage, path_or_url: Optional[str]) -> bool:
    """Best-effort delete; failures are logged and reported as False."""
    if not path_or_url:
        return False
    path = object_path(path_or_url, storage.bucket)
    try:
        storage.remove([path])
    except Exception:
        logger.exception("failed to delete %s from storage", path)
        return False
    return True


@lru_cache(maxsize=1)
def get_storage():
    """Return the configured storage backend (one instance per process)."""
    if settings.STORAGE_BACKEND == "supabase":
        return SupabaseStorage(settings.SUPABASE_URL, settings.SUPABASE_SERVICE_KEY, settings.SUPABASE_BUCKET_NAME)
    return LocalStorage(settings.LOCAL_STORAGE_DIR, settings.SUPABASE_BUCKET_NAME)
