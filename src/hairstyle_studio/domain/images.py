"""Image reference and image payload models."""

import base64
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import urlsplit


@dataclass(frozen=True)
class LocalServed:
    """Image served by this process from managed storage."""

    filename: str


@dataclass(frozen=True)
class Inline:
    """Image embedded in the reference as a base64 data URL."""

    mime_type: str
    payload: str


@dataclass(frozen=True)
class Remote:
    """Image that must be fetched over HTTP(S)."""

    url: str


@dataclass(frozen=True)
class Unrecognized:
    """Reference with no known source kind."""

    raw: str


ImageReference = LocalServed | Inline | Remote | Unrecognized


@dataclass(frozen=True)
class ImagePart:
    """Binary image sent to or received from the model service."""

    data: bytes
    mime_type: str


def parse_reference(raw: str | None, local_prefixes: Iterable[str]) -> ImageReference:
    """Classify a raw reference string; the first matching kind wins."""
    if not raw:
        return Unrecognized(raw="")
    for prefix in local_prefixes:
        if raw.startswith(prefix):
            filename = urlsplit(raw).path.rsplit("/", maxsplit=1)[-1]
            return LocalServed(filename=filename)
    if raw.startswith("data:"):
        header, _, payload = raw.partition(",")
        mime_type = header.removeprefix("data:").split(";", maxsplit=1)[0]
        return Inline(mime_type=mime_type or "image/jpeg", payload=payload)
    if raw.startswith(("http://", "https://")):
        return Remote(url=raw)
    return Unrecognized(raw=raw)


def detect_mime_type(image_bytes: bytes) -> str:
    """Infer a basic image MIME type from file signatures."""
    if image_bytes.startswith(b"\xff\xd8\xff"):
        return "image/jpeg"
    if image_bytes.startswith(b"\x89PNG\r\n\x1a\n"):
        return "image/png"
    if image_bytes[:4] == b"RIFF" and image_bytes[8:12] == b"WEBP":
        return "image/webp"
    return "image/jpeg"


def to_data_url(image: ImagePart) -> str:
    """Convert an image part to a base64 data URL for model input."""
    encoded = base64.b64encode(image.data).decode("utf-8")
    return f"data:{image.mime_type};base64,{encoded}"
