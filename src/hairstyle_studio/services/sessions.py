"""In-process session store with per-session atomic merges."""

import asyncio
import dataclasses
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field

from hairstyle_studio.domain.sessions import GenerationResult, SessionRecord

logger = logging.getLogger(__name__)

_PHOTO_FIELDS = frozenset({"customer_photo_urls", "style_photo_urls"})
_MERGEABLE_FIELDS = frozenset({"user_info", "hair_condition"}) | _PHOTO_FIELDS


@dataclass
class SessionStore:
    """Ephemeral mapping of session id to session record.

    Records live for the lifetime of the process. Each read-modify-write runs
    under a lock owned by the session id, so concurrent writers to the same
    session never lose each other's fields. Locks are created on first use
    and, like the records, are only released by ``clear()``.
    """

    _records: dict[str, SessionRecord] = field(default_factory=dict)
    _locks: dict[str, asyncio.Lock] = field(default_factory=dict)

    def _lock_for(self, session_id: str) -> asyncio.Lock:
        return self._locks.setdefault(session_id, asyncio.Lock())

    async def get(self, session_id: str) -> SessionRecord | None:
        """Return the current snapshot of a session, if present."""
        async with self._lock_for(session_id):
            return self._records.get(session_id)

    async def upsert(
        self, session_id: str, changes: Mapping[str, object]
    ) -> SessionRecord:
        """Merge the supplied fields into a session, creating it if needed.

        Photo maps are merged by slot, so uploading ``side`` keeps a stored
        ``front``. Other fields are replaced.
        """
        unknown = set(changes) - _MERGEABLE_FIELDS
        if unknown:
            raise ValueError(f"Cannot upsert session fields: {sorted(unknown)}")
        async with self._lock_for(session_id):
            current = self._records.get(session_id) or SessionRecord(
                session_id=session_id
            )
            merged = {
                key: {**getattr(current, key), **value}
                if key in _PHOTO_FIELDS
                else value
                for key, value in changes.items()
            }
            updated = dataclasses.replace(current, **merged)
            self._records[session_id] = updated
        logger.info(
            "Session updated",
            extra={"session_id": session_id, "fields": sorted(changes)},
        )
        return updated

    async def append_result(
        self, session_id: str, result: GenerationResult
    ) -> SessionRecord:
        """Append a generation result to a session's history."""
        async with self._lock_for(session_id):
            current = self._records.get(session_id) or SessionRecord(
                session_id=session_id
            )
            updated = dataclasses.replace(
                current, generated_images=(*current.generated_images, result)
            )
            self._records[session_id] = updated
        return updated

    async def clear(self) -> None:
        """Drop every session."""
        self._records.clear()
        self._locks.clear()
