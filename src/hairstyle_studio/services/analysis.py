"""Style-change and feasibility analysis via the vision model."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from hairstyle_studio.domain.analysis import (
    HAIRCUT_PROCEDURE,
    STATIC_TECHNICAL_SPECS,
    AnalysisDefaults,
    FeasibilityRecord,
    StyleChangeAnalysis,
    TechnicalSpecs,
)
from hairstyle_studio.domain.hair import HairCondition
from hairstyle_studio.domain.images import ImagePart, detect_mime_type
from hairstyle_studio.domain.sessions import Outcome
from hairstyle_studio.errors import InvalidRequestError
from hairstyle_studio.services.images import ImageSourceResolver
from hairstyle_studio.services.prompts import feasibility_prompt, style_changes_prompt
from hairstyle_studio.services.structured_output import recover_record

logger = logging.getLogger(__name__)


class AnalysisClient(Protocol):
    """Interface for the text/vision analysis capability."""

    async def analyze(self, *, instruction: str, images: list[ImagePart]) -> str:
        """Return the model's free-form text answer."""


@dataclass(frozen=True)
class StyleChangeReport:
    """Style changes plus how the analysis finished."""

    analysis: StyleChangeAnalysis
    outcome: Outcome


@dataclass(frozen=True)
class FeasibilityReport:
    """Feasibility record, derived procedure sheet and outcome."""

    feasibility: FeasibilityRecord
    technical_specs: TechnicalSpecs
    outcome: Outcome


@dataclass
class AnalysisService:
    """Builds analysis requests and recovers structured answers."""

    client: AnalysisClient
    resolver: ImageSourceResolver
    timeout_seconds: float
    defaults: AnalysisDefaults

    async def analyze_style_changes(
        self,
        session_id: str | None,
        current_photo_ref: str | None,
        target_photo_ref: str | None,
        hair_condition: HairCondition | None,
    ) -> StyleChangeReport:
        """Compare the current and target photos."""
        if not session_id or not current_photo_ref or not target_photo_ref:
            raise InvalidRequestError(
                "Missing required fields: sessionId, customerPhotoUrl, "
                "selectedStyleImageUrl"
            )
        logger.info("Analyzing style changes", extra={"session_id": session_id})
        default = self.defaults.style_changes.model_copy(deep=True)

        current = await self.resolver.resolve(current_photo_ref)
        target = await self.resolver.resolve(target_photo_ref)
        if current is None or target is None:
            logger.warning(
                "Comparison images unavailable, using defaults",
                extra={
                    "session_id": session_id,
                    "current_available": current is not None,
                    "target_available": target is not None,
                },
            )
            return StyleChangeReport(analysis=default, outcome=Outcome.DEGRADED)

        text = await self._ask(
            session_id,
            style_changes_prompt(hair_condition or HairCondition()),
            [current, target],
        )
        if text is None:
            return StyleChangeReport(analysis=default, outcome=Outcome.DEGRADED)
        analysis, recovered = recover_record(text, StyleChangeAnalysis, default)
        return StyleChangeReport(
            analysis=analysis,
            outcome=Outcome.SUCCESS if recovered else Outcome.DEGRADED,
        )

    async def analyze_feasibility(
        self,
        session_id: str | None,
        customer_photo_ref: str | None,
        target_photo_ref: str | None,
        hair_condition: HairCondition | None,
    ) -> FeasibilityReport:
        """Score how achievable the target style is for this customer."""
        if not session_id or not target_photo_ref or hair_condition is None:
            raise InvalidRequestError("Missing required fields")
        logger.info("Analyzing feasibility", extra={"session_id": session_id})
        default = self.defaults.feasibility.model_copy(deep=True)

        customer = await self.resolver.resolve(customer_photo_ref)
        target = await self.resolver.resolve(target_photo_ref)
        if customer is None or target is None:
            logger.warning(
                "Some images failed to load, continuing with available data",
                extra={
                    "session_id": session_id,
                    "customer_available": customer is not None,
                    "target_available": target is not None,
                },
            )
        available = [data for data in (customer, target) if data is not None]

        text = await self._ask(session_id, feasibility_prompt(hair_condition), available)
        if text is None:
            feasibility, recovered = default, False
        else:
            feasibility, recovered = recover_record(text, FeasibilityRecord, default)

        technical_specs = STATIC_TECHNICAL_SPECS.model_copy(
            update={
                "additional_services": [
                    name
                    for name in feasibility.required_procedures
                    if name != HAIRCUT_PROCEDURE
                ]
            },
            deep=True,
        )
        return FeasibilityReport(
            feasibility=feasibility,
            technical_specs=technical_specs,
            outcome=Outcome.SUCCESS if recovered else Outcome.DEGRADED,
        )

    async def _ask(
        self, session_id: str, instruction: str, images: list[bytes]
    ) -> str | None:
        parts = [ImagePart(data=data, mime_type=detect_mime_type(data)) for data in images]
        context = {
            "session_id": session_id,
            "image_bytes": [len(data) for data in images],
        }
        try:
            text = await asyncio.wait_for(
                self.client.analyze(instruction=instruction, images=parts),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            logger.warning("Analysis call timed out", extra=context)
            return None
        except Exception:
            logger.exception("Analysis call failed", extra=context)
            return None
        logger.info(
            "Analysis reply received", extra={**context, "reply_length": len(text)}
        )
        return text
