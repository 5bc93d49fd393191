from dataclasses import dataclass

import cloudinary
import cloudinary.exceptions
import cloudinary.uploader

from app.core.config import settings
from app.core.errors import ServiceNotConfigured


@dataclass
class MediaHostConfig:
    cloud_name: str
    api_key: str
    api_secret: str
    timeout: int = 60


class MediaHostError(RuntimeError):
    pass


class MediaHostClient:
    """Signed uploads through the Cloudinary SDK."""

    def __init__(self, cfg: MediaHostConfig):
        self.cfg = cfg
        cloudinary.config(
            cloud_name=cfg.cloud_name,
            api_key=cfg.api_key,
            api_secret=cfg.api_secret,
            secure=True,
        )

    def upload(self, *, content: bytes, filename: str, folder: str, resource_type: str = "auto") -> dict:
        options = {"folder": folder, "resource_type": resource_type, "timeout": self.cfg.timeout}
        if filename:
            options["filename_override"] = filename
        try:
            result = cloudinary.uploader.upload(content, **options)
        except cloudinary.exceptions.Error as e:
            raise MediaHostError(f"Media upload failed: {e}") from e
        if not result or not result.get("secure_url"):
            raise MediaHostError("Media host response did not include a URL")
        return result


def get_media_client() -> MediaHostClient:
    missing = [k for k in ("CLOUDINARY_CLOUD_NAME", "CLOUDINARY_API_KEY", "CLOUDINARY_API_SECRET") if not getattr(settings, k)]
    if missing:
        raise ServiceNotConfigured("Media host", missing)
    return MediaHostClient(MediaHostConfig(
        cloud_name=settings.CLOUDINARY_CLOUD_NAME,
        api_key=settings.CLOUDINARY_API_KEY,
        api_secret=settings.CLOUDINARY_API_SECRET,
    ))


def upload_file(content: bytes, filename: str, folder: str) -> str:
    """Upload and return the hosted https URL."""
    if not content:
        raise ValueError("No file uploaded")
    return get_media_client().upload(content=content, filename=filename, folder=folder)["secure_url"]
