"""Storage of customer and style photo uploads."""

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import PurePath

from hairstyle_studio.domain.hair import HairCondition
from hairstyle_studio.errors import InvalidRequestError
from hairstyle_studio.services.images import ImageStorage
from hairstyle_studio.services.sessions import SessionStore

logger = logging.getLogger(__name__)

CUSTOMER_PHOTO_FIELDS = ("front", "side", "back")
STYLE_PHOTO_FIELDS = ("photo1", "photo2", "photo3")


@dataclass(frozen=True)
class UploadedFile:
    """Raw upload received from the client."""

    filename: str | None
    data: bytes


@dataclass
class UploadService:
    """Persists uploaded photos and records their URLs on the session."""

    storage: ImageStorage
    session_store: SessionStore
    max_upload_bytes: int

    async def upload_customer(
        self,
        session_id: str | None,
        photos: Mapping[str, UploadedFile],
        user_info: dict[str, object] | None,
        hair_condition: HairCondition | None,
    ) -> dict[str, str]:
        """Store customer photos and intake data; return the photo URLs."""
        if not session_id:
            raise InvalidRequestError("sessionId is required")
        photo_urls = self._store_all(photos, CUSTOMER_PHOTO_FIELDS)
        changes: dict[str, object] = {}
        if photo_urls:
            changes["customer_photo_urls"] = photo_urls
        if user_info is not None:
            changes["user_info"] = user_info
        if hair_condition is not None:
            changes["hair_condition"] = hair_condition
        await self.session_store.upsert(session_id, changes)
        logger.info(
            "Customer data uploaded",
            extra={"session_id": session_id, "photos": sorted(photo_urls)},
        )
        return photo_urls

    async def upload_style(
        self, session_id: str | None, photos: Mapping[str, UploadedFile]
    ) -> dict[str, str]:
        """Store reference style photos; return their URLs."""
        if not session_id:
            raise InvalidRequestError("sessionId is required")
        photo_urls = self._store_all(photos, STYLE_PHOTO_FIELDS)
        changes = {"style_photo_urls": photo_urls} if photo_urls else {}
        await self.session_store.upsert(session_id, changes)
        logger.info(
            "Style photos uploaded",
            extra={"session_id": session_id, "photos": sorted(photo_urls)},
        )
        return photo_urls

    def _store_all(
        self, photos: Mapping[str, UploadedFile], fields: tuple[str, ...]
    ) -> dict[str, str]:
        for name, upload in photos.items():
            if name not in fields:
                raise InvalidRequestError(f"Unexpected file field: {name}")
            if len(upload.data) > self.max_upload_bytes:
                raise InvalidRequestError(f"File too large: {name}")
        urls: dict[str, str] = {}
        for name in fields:
            upload = photos.get(name)
            if upload is None:
                continue
            extension = PurePath(upload.filename or "").suffix.lower()
            stored = self.storage.save(upload.data, prefix=name, extension=extension)
            urls[name] = self.storage.public_url(stored)
        return urls
