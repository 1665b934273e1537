"""Image upload through a hosted transformation service.

The caller has already validated that the upload is an image. The service
receives the raw bytes plus a resize directive and answers with a CDN URL that
the editor substitutes into the document:

- ``fit``: keep the aspect ratio and scale to fit inside width x height;
- ``fill``: crop to exactly width x height.

No retry and no queue: any upstream failure becomes ``ImageServiceError``.
"""
import hashlib
import logging
import mimetypes
import time
import uuid
from dataclasses import dataclass
from typing import Optional

import requests
from django.conf import settings
from django.core.files.base import ContentFile

logger = logging.getLogger(__name__)

FIT = "fit"
FILL = "fill"


class ImageServiceError(Exception):
    """The hosted image service rejected the upload or could not be reached."""


@dataclass(frozen=True)
class ResizeDirective:
    width: int
    height: int
    mode: str = FIT

    @classmethod
    def from_request(cls, width: Optional[int], height: Optional[int], maintain_aspect_ratio: bool = True):
        if not width or not height:
            return None
        return cls(width=width, height=height, mode=FIT if maintain_aspect_ratio else FILL)


EXTENSIONS = {"image/jpeg": ".jpg", "image/png": ".png", "image/gif": ".gif", "image/webp": ".webp"}


def object_name(content_type: str, image_type: str = "content") -> str:
    # Extension follows the detected image type, never the client file name
    ext = EXTENSIONS.get(content_type) or mimetypes.guess_extension(content_type or "") or ""
    return f"{image_type}/{uuid.uuid4().hex}{ext}"


class SupabaseImageService:
    """Stores the original in a Supabase bucket; resizing happens on the render endpoint."""

    resize_modes = {FIT: "contain", FILL: "cover"}

    def __init__(self, storage=None):
        if storage is None:
            from .storage_backends import SupabaseMediaStorage

            storage = SupabaseMediaStorage()
        self.storage = storage

    def upload(self, name: str, data: bytes, content_type: str, directive: Optional[ResizeDirective]) -> str:
        content = ContentFile(data, name=name)
        content.content_type = content_type
        try:
            saved = self.storage.save(name, content)
        except Exception as exc:  # supabase client raises its own exception types
            raise ImageServiceError(str(exc)) from exc
        if directive is None:
            return self.storage.url(saved)
        return self.storage.render_url(saved, directive.width, directive.height, self.resize_modes[directive.mode])


class CloudinaryImageService:
    """Signed upload to Cloudinary with the resize applied as an incoming transformation."""

    crop_modes = {FIT: "c_fit", FILL: "c_fill"}

    def __init__(self, cloud_name=None, api_key=None, api_secret=None, folder=None):
        self.cloud_name = cloud_name or getattr(settings, "CLOUDINARY_CLOUD_NAME", "")
        self.api_key = api_key or getattr(settings, "CLOUDINARY_API_KEY", "")
        self.api_secret = api_secret or getattr(settings, "CLOUDINARY_API_SECRET", "")
        self.folder = folder if folder is not None else getattr(settings, "CLOUDINARY_FOLDER", "")
        if not (self.cloud_name and self.api_key and self.api_secret):
            raise RuntimeError("CLOUDINARY_CLOUD_NAME, CLOUDINARY_API_KEY and CLOUDINARY_API_SECRET must be set")
        self.endpoint = f"https://api.cloudinary.com/v1_1/{self.cloud_name}/image/upload"

    def transformation(self, directive: Optional[ResizeDirective]) -> str:
        if directive is None:
            return ""
        return f"{self.crop_modes[directive.mode]},w_{directive.width},h_{directive.height}"

    def sign(self, params: dict) -> str:
        payload = "&".join(f"{k}={params[k]}" for k in sorted(params) if params[k] not in ("", None))
        return hashlib.sha1((payload + self.api_secret).encode("utf-8")).hexdigest()

    def upload(self, name: str, data: bytes, content_type: str, directive: Optional[ResizeDirective]) -> str:
        folder, _, public_id = name.rpartition("/")
        public_id = public_id.rsplit(".", 1)[0]
        if self.folder:
            folder = f"{self.folder}/{folder}" if folder else self.folder
        params = {
            "folder": folder,
            "public_id": public_id,
            "timestamp": int(time.time()),
            "transformation": self.transformation(directive),
        }
        params = {k: v for k, v in params.items() if v not in ("", None)}
        body = dict(params, api_key=self.api_key, signature=self.sign(params))
        try:
            r = requests.post(
                self.endpoint,
                data=body,
                files={"file": (name.rsplit("/", 1)[-1], data, content_type)},
                timeout=30,
            )
        except requests.RequestException as exc:
            raise ImageServiceError(str(exc)) from exc
        if not r.ok:
            raise ImageServiceError(f"cloudinary upload failed: {r.status_code} {r.text[:300]}")
        try:
            payload = r.json()
        except ValueError as exc:
            raise ImageServiceError("cloudinary response was not JSON") from exc
        if not isinstance(payload, dict):
            raise ImageServiceError("cloudinary response was not a JSON object")
        url = payload.get("secure_url")
        if not url:
            raise ImageServiceError("cloudinary response did not include secure_url")
        return url


SERVICES = {
    "supabase": SupabaseImageService,
    "cloudinary": CloudinaryImageService,
}


def get_image_service():
    name = getattr(settings, "IMAGE_SERVICE", "supabase")
    try:
        service_class = SERVICES[name]
    except KeyError:
        raise RuntimeError(f"unknown IMAGE_SERVICE: {name}") from None
    return service_class()


def upload_image(uploaded_file, directive: Optional[ResizeDirective], image_type: str = "content") -> str:
    content_type = getattr(uploaded_file, "content_type", "") or "application/octet-stream"
    name = object_name(content_type, image_type)
    uploaded_file.seek(0)
    data = uploaded_file.read()
    try:
        service = get_image_service()
    except RuntimeError as exc:
        raise ImageServiceError(str(exc)) from exc
    started = time.monotonic()
    url = service.upload(name, data, content_type, directive)
    logger.info(
        "Uploaded %s (%d bytes, %s) in %dms",
        name,
        len(data),
        f"{directive.mode} {directive.width}x{directive.height}" if directive else "original size",
        int((time.monotonic() - started) * 1000),
    )
    return url
