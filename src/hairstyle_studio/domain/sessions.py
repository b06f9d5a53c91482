"""Domain models for salon consultation sessions."""

from dataclasses import dataclass, field
from enum import StrEnum

from hairstyle_studio.domain.hair import HairCondition


class Outcome(StrEnum):
    """How an orchestrated model call finished."""

    SUCCESS = "success"
    DEGRADED = "degraded"


@dataclass(frozen=True)
class GenerationResult:
    """One style synthesis attempt recorded on a session."""

    image_url: str | None
    style_photo_url: str | None
    description: str
    outcome: Outcome


@dataclass(frozen=True)
class SessionRecord:
    """Accumulated uploads and results for one session id."""

    session_id: str
    user_info: dict[str, object] = field(default_factory=dict)
    hair_condition: HairCondition | None = None
    customer_photo_urls: dict[str, str] = field(default_factory=dict)
    style_photo_urls: dict[str, str] = field(default_factory=dict)
    generated_images: tuple[GenerationResult, ...] = ()
