"""Resolution of image references into raw bytes."""

import base64
import binascii
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import urlsplit

from hairstyle_studio.domain.images import (
    Inline,
    LocalServed,
    Remote,
    parse_reference,
)
from hairstyle_studio.errors import ImageDecodeError

logger = logging.getLogger(__name__)

_LOOPBACK_HOSTS = ("localhost", "127.0.0.1")


class ImageStorage(Protocol):
    """Managed storage for uploaded and generated images."""

    def save(self, data: bytes, *, prefix: str, extension: str) -> str:
        """Store bytes under a fresh unique filename and return the name."""

    def read(self, filename: str) -> bytes | None:
        """Return stored bytes, or None when the file does not exist."""

    def public_url(self, filename: str) -> str:
        """Return the URL under which a stored file is served."""


class ImageFetcher(Protocol):
    """Interface for downloading remote images."""

    async def fetch(self, url: str) -> bytes | None:
        """Return image bytes, or None on a non-success status or failure."""


@dataclass
class ImageSourceResolver:
    """Turn local, inline and remote references into image bytes."""

    storage: ImageStorage
    fetcher: ImageFetcher
    local_prefixes: Sequence[str]

    async def resolve(self, reference: str | None) -> bytes | None:
        """Return image bytes for a reference, or None when unavailable.

        Malformed or empty inline data raises ``ImageDecodeError``.
        """
        parsed = parse_reference(reference, self.local_prefixes)
        if isinstance(parsed, LocalServed):
            data = self.storage.read(parsed.filename)
            if data is None:
                logger.info(
                    "Local image is no longer in storage",
                    extra={"stored_filename": parsed.filename},
                )
            return data
        if isinstance(parsed, Inline):
            return _decode_inline(parsed.payload)
        if isinstance(parsed, Remote):
            data = await self.fetcher.fetch(parsed.url)
            if data is None:
                logger.warning("Remote image unavailable", extra={"url": parsed.url})
            return data
        return None


def _decode_inline(payload: str) -> bytes:
    try:
        data = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ImageDecodeError("Inline image data is not valid base64") from exc
    if not data:
        raise ImageDecodeError("Inline image data is empty")
    return data


def local_prefixes(public_base_url: str, mount_path: str = "/uploads") -> list[str]:
    """Return the reference prefixes that point at locally served files."""
    base = public_base_url.rstrip("/")
    prefixes = [f"{base}{mount_path}/"]
    parts = urlsplit(base)
    if parts.hostname in _LOOPBACK_HOSTS:
        port = f":{parts.port}" if parts.port else ""
        prefixes.extend(
            f"{parts.scheme}://{host}{port}{mount_path}/" for host in _LOOPBACK_HOSTS
        )
    prefixes.append(f"{mount_path}/")
    return list(dict.fromkeys(prefixes))
