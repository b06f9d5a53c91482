"""Filesystem-backed storage for uploaded and generated images."""

import logging
import secrets
import time
from dataclasses import dataclass
from pathlib import Path

from hairstyle_studio.errors import StorageError
from hairstyle_studio.services.images import ImageStorage

logger = logging.getLogger(__name__)


@dataclass
class LocalImageStorage(ImageStorage):
    """Stores images as files under a single root directory."""

    root: Path
    public_base_url: str
    mount_path: str = "/uploads"

    @classmethod
    def create(cls, root: Path, public_base_url: str) -> "LocalImageStorage":
        """Create storage, making sure the root directory exists."""
        root.mkdir(parents=True, exist_ok=True)
        return cls(root=root, public_base_url=public_base_url.rstrip("/"))

    def save(self, data: bytes, *, prefix: str, extension: str) -> str:
        """Write bytes under ``<prefix>-<ms>-<random><extension>``."""
        filename = f"{prefix}-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}"
        filename += extension
        try:
            (self.root / filename).write_bytes(data)
        except OSError as exc:
            logger.exception(
                "Failed to write image", extra={"stored_filename": filename}
            )
            raise StorageError(f"Could not store image {filename}") from exc
        return filename

    def read(self, filename: str) -> bytes | None:
        """Read a stored file; names outside the root are treated as missing."""
        if not filename or Path(filename).name != filename:
            return None
        path = self.root / filename
        if not path.is_file():
            return None
        return path.read_bytes()

    def public_url(self, filename: str) -> str:
        """Return the absolute URL for a stored file."""
        return f"{self.public_base_url}{self.mount_path}/{filename}"
