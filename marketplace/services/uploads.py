from __future__ import annotations

from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path, PurePosixPath

from fastapi import UploadFile

from marketplace.core.config import settings
from marketplace.core.errors import ValidationError
from marketplace.core.ids import gen_upload_name

MISSING_IMAGES = "Au moins une image est requise"
TOO_MANY_IMAGES = "Trop d'images. Maximum {limit} fichiers."
BAD_IMAGE_TYPE = "Type de fichier non autorisé. Utilisez JPG, JPEG ou PNG."
IMAGE_TOO_LARGE = "Fichier trop volumineux. Taille maximale : {limit_mb} Mo."

_SUFFIX_BY_TYPE = {"image/jpeg": ".jpg", "image/jpg": ".jpg", "image/png": ".png"}


@dataclass(frozen=True)
class PendingImage:
    stem: str
    content_type: str
    data: bytes

    @property
    def filename(self) -> str:
        # extension follows the checked content type, never the client filename
        return self.stem + _SUFFIX_BY_TYPE[self.content_type]


class LocalUploadStore:
    """
    Listing images on local disk, served by the app under `url_prefix`.

    Files are checked by `prepare` (count, content type, size) without touching
    the disk; `save` writes them once the rest of the request is valid.
    """

    def __init__(
        self,
        base_dir: str,
        *,
        url_prefix: str = "/uploads",
        max_files: int = 10,
        max_bytes: int = 10 * 1024 * 1024,
        allowed_types: list[str] | None = None,
    ):
        self.base = Path(base_dir)
        self.base.mkdir(parents=True, exist_ok=True)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_files = max_files
        self.max_bytes = max_bytes
        self.allowed_types = set(allowed_types or _SUFFIX_BY_TYPE)

    async def prepare(self, files: list[UploadFile]) -> list[PendingImage]:
        if not files:
            raise ValidationError(MISSING_IMAGES, details=[{"field": "images", "message": MISSING_IMAGES}])
        if len(files) > self.max_files:
            msg = TOO_MANY_IMAGES.format(limit=self.max_files)
            raise ValidationError(msg, details=[{"field": "images", "message": msg}])

        pending: list[PendingImage] = []
        for f in files:
            content_type = (f.content_type or "").lower()
            if content_type not in self.allowed_types or content_type not in _SUFFIX_BY_TYPE:
                raise ValidationError(BAD_IMAGE_TYPE, details=[{"field": "images", "message": BAD_IMAGE_TYPE}])

            # at most limit + 1 bytes are read
            data = await f.read(self.max_bytes + 1)
            if len(data) > self.max_bytes:
                msg = IMAGE_TOO_LARGE.format(limit_mb=self.max_bytes // (1024 * 1024))
                raise ValidationError(msg, details=[{"field": "images", "message": msg}])

            pending.append(PendingImage(stem=gen_upload_name(), content_type=content_type, data=data))
        return pending

    def url_for(self, image: PendingImage) -> str:
        return f"{self.url_prefix}/{image.filename}"

    def save(self, images: list[PendingImage]) -> list[str]:
        urls = []
        for image in images:
            path = self.base / image.filename
            path.write_bytes(image.data)
            urls.append(self.url_for(image))
        return urls

    def resolve_path(self, url: str) -> Path:
        """
        Map a public image URL back to its file under `base`.
        """
        name = PurePosixPath(url).name
        if not url.startswith(self.url_prefix + "/") or not name:
            raise ValueError(f"Not an upload URL: {url}")
        return self.base / name


@lru_cache
def get_upload_store() -> LocalUploadStore:
    return LocalUploadStore(
        settings.upload_dir,
        url_prefix=settings.upload_url_prefix,
        max_files=settings.max_upload_files,
        max_bytes=settings.max_upload_bytes,
        allowed_types=settings.allowed_image_types,
    )
