"""Local disk storage for uploaded product images."""

import os
import uuid
from typing import Iterable, Optional

import structlog

from storefront.config import get_settings

logger = structlog.get_logger(__name__)

PRODUCT_IMAGE_SUBDIR = "products"

ALLOWED_EXTENSIONS = {"jpg", "jpeg", "png", "gif", "webp", "bmp", "svg"}
EXTENSIONS_BY_TYPE = {
    "image/jpeg": "jpg",
    "image/png": "png",
    "image/gif": "gif",
    "image/webp": "webp",
    "image/bmp": "bmp",
    "image/svg+xml": "svg",
}


class ImageStorage:
    """Writes product images under ``UPLOAD_DIR/products`` and maps them to public URLs."""

    def __init__(self, root: Optional[str] = None, url_prefix: Optional[str] = None):
        settings = get_settings()
        self.root = root or settings.UPLOAD_DIR
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    @property
    def directory(self) -> str:
        return os.path.join(self.root, PRODUCT_IMAGE_SUBDIR)

    def _extension(self, filename: Optional[str], content_type: Optional[str]) -> str:
        if filename and "." in filename:
            ext = filename.rsplit(".", 1)[-1].lower()
            if ext in ALLOWED_EXTENSIONS:
                return ext
        return EXTENSIONS_BY_TYPE.get(content_type or "", "img")

    def save(self, content: bytes, filename: Optional[str], content_type: Optional[str]) -> str:
        """Persist one image and return its public URL."""
        os.makedirs(self.directory, exist_ok=True)
        safe_name = f"{uuid.uuid4().hex}.{self._extension(filename, content_type)}"
        with open(os.path.join(self.directory, safe_name), "wb") as f:
            f.write(content)
        return f"{self.url_prefix}/{PRODUCT_IMAGE_SUBDIR}/{safe_name}"

    def path_for_url(self, url: Optional[str]) -> Optional[str]:
        """Local path of an image we stored, or None for external URLs."""
        prefix = f"{self.url_prefix}/{PRODUCT_IMAGE_SUBDIR}/"
        if not url or not url.startswith(prefix):
            return None
        name = os.path.basename(url[len(prefix):])
        if not name:
            return None
        return os.path.join(self.directory, name)

    def delete(self, url: Optional[str]) -> bool:
        """Best-effort removal. Missing files are logged, never raised."""
        path = self.path_for_url(url)
        if path is None:
            return False
        try:
            os.remove(path)
        except FileNotFoundError:
            logger.warning("Image file already missing", path=path)
            return False
        except OSError as e:
            logger.error("Failed to delete image file", path=path, error=str(e))
            return False
        logger.info("Image file deleted", path=path)
        return True

    def delete_many(self, urls: Iterable[Optional[str]]) -> None:
        for url in urls:
            self.delete(url)
