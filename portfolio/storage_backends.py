import mimetypes
from typing import Dict, Optional
from urllib.parse import urlencode

from django.conf import settings
from django.core.files.base import File
from django.core.files.storage import Storage

from supabase import create_client

_supabase_client = None


def _get_client():
    global _supabase_client  # noqa: PLW0603
    if _supabase_client is None:
        url = getattr(settings, "SUPABASE_PROJECT_URL", "")
        key = getattr(settings, "SUPABASE_SERVICE_ROLE_KEY", "") or getattr(settings, "SUPABASE_ANON_KEY", "")
        if not url or not key:
            raise RuntimeError("SUPABASE_PROJECT_URL and a service role (or anon) key must be set")
        _supabase_client = create_client(url, key)
    return _supabase_client


class SupabaseMediaStorage(Storage):
    """Django Storage backend for a public Supabase Storage bucket.

    Besides the plain object URL, ``render_url`` builds a URL on Supabase's
    image transformation endpoint, which resizes on the CDN when requested.
    """

    # Supabase render endpoint resize modes
    RESIZE_MODES = ("cover", "contain", "fill")

    def __init__(self, bucket: Optional[str] = None) -> None:
        super().__init__()
        self.bucket: str = bucket or getattr(settings, "SUPABASE_BUCKET", "media")
        if not self.bucket:
            raise RuntimeError("SUPABASE_BUCKET must be set")
        base = getattr(settings, "SUPABASE_PROJECT_URL", "")
        if not base:
            raise RuntimeError("SUPABASE_PROJECT_URL must be set to the project API URL")
        self.base = base.rstrip("/")
        self.public_base = f"{self.base}/storage/v1/object/public/{self.bucket}"
        self.render_base = f"{self.base}/storage/v1/render/image/public/{self.bucket}"

    def _full_path(self, name: str) -> str:
        return name.lstrip("/")

    def _save(self, name: str, content: File) -> str:
        client = _get_client()
        path = self._full_path(name)
        if hasattr(content, "seek"):
            content.seek(0)
        data = content.read()
        if isinstance(data, str):
            data = data.encode("utf-8")
        ctype = (
            getattr(content, "content_type", None)
            or mimetypes.guess_type(path)[0]
            or "application/octet-stream"
        )
        client.storage.from_(self.bucket).upload(path, data, {"content-type": ctype, "upsert": "true"})
        return name

    def exists(self, name: str) -> bool:
        client = _get_client()
        path = self._full_path(name)
        prefix, _, target = path.rpartition("/")
        items = client.storage.from_(self.bucket).list(prefix or None)
        return any((it.get("name") if isinstance(it, dict) else getattr(it, "name", None)) == target for it in items)

    def url(self, name: str) -> str:
        return f"{self.public_base}/{self._full_path(name)}"

    def render_url(self, name: str, width: int, height: int, resize: str = "contain") -> str:
        if resize not in self.RESIZE_MODES:
            raise ValueError(f"unsupported resize mode: {resize}")
        params: Dict[str, object] = {"width": width, "height": height, "resize": resize}
        return f"{self.render_base}/{self._full_path(name)}?{urlencode(params)}"

