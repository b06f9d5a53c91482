"""Hairstyle image synthesis orchestration."""

import asyncio
import logging
from dataclasses import dataclass
from typing import Protocol

from hairstyle_studio.domain.analysis import STATIC_TECHNICAL_SPECS, TechnicalSpecs
from hairstyle_studio.domain.hair import HairCondition
from hairstyle_studio.domain.images import ImagePart, detect_mime_type
from hairstyle_studio.domain.sessions import GenerationResult, Outcome
from hairstyle_studio.errors import InvalidRequestError
from hairstyle_studio.services.images import ImageSourceResolver, ImageStorage
from hairstyle_studio.services.prompts import generation_prompt
from hairstyle_studio.services.sessions import SessionStore

logger = logging.getLogger(__name__)

GENERATED_DESCRIPTION = "헤어스타일 이미지 생성 완료"
DEGRADED_DESCRIPTION = "스타일 적용 완료"
UNAVAILABLE_DESCRIPTION = "이미지를 불러올 수 없습니다"

_EXTENSIONS = {"image/png": ".png", "image/webp": ".webp", "image/jpeg": ".jpg"}


@dataclass(frozen=True)
class ReplyPart:
    """One part of a model reply: commentary text or image bytes."""

    text: str | None = None
    image: ImagePart | None = None


class GenerationClient(Protocol):
    """Interface for the image synthesis capability."""

    async def generate(
        self, *, instruction: str, images: list[ImagePart]
    ) -> list[ReplyPart]:
        """Return the ordered parts of the model reply."""


@dataclass(frozen=True)
class GenerationOutput:
    """Result of a style generation request."""

    result: GenerationResult
    style_name: str
    technical_specs: TechnicalSpecs


@dataclass
class GenerationService:
    """Applies a reference hairstyle to a customer photo."""

    client: GenerationClient
    resolver: ImageSourceResolver
    storage: ImageStorage
    session_store: SessionStore
    timeout_seconds: float

    async def generate_style(
        self,
        session_id: str | None,
        customer_photo_ref: str | None,
        style_photo_ref: str | None,
        hair_condition: HairCondition | None,
    ) -> GenerationOutput:
        """Synthesize a style preview and record it on the session.

        Once the request validates this always succeeds: when synthesis does
        not produce an image, the result falls back to an input photo and is
        marked ``Outcome.DEGRADED``. Only storage failures propagate.
        """
        if not session_id or not style_photo_ref or hair_condition is None:
            raise InvalidRequestError("Missing required fields")

        logger.info("Generating style image", extra={"session_id": session_id})
        customer_bytes = await self.resolver.resolve(customer_photo_ref)
        style_bytes = await self.resolver.resolve(style_photo_ref)

        if customer_bytes is not None:
            fallback_ref = customer_photo_ref
        elif style_bytes is not None:
            fallback_ref = style_photo_ref
        else:
            fallback_ref = None

        if customer_bytes is None or style_bytes is None:
            logger.warning(
                "Input image unavailable, returning fallback photo",
                extra={
                    "session_id": session_id,
                    "customer_available": customer_bytes is not None,
                    "style_available": style_bytes is not None,
                },
            )
            result = GenerationResult(
                image_url=fallback_ref,
                style_photo_url=style_photo_ref,
                description=UNAVAILABLE_DESCRIPTION,
                outcome=Outcome.DEGRADED,
            )
        else:
            image = await self._synthesize(
                session_id, hair_condition, customer_bytes, style_bytes
            )
            if image is None:
                result = GenerationResult(
                    image_url=fallback_ref,
                    style_photo_url=style_photo_ref,
                    description=DEGRADED_DESCRIPTION,
                    outcome=Outcome.DEGRADED,
                )
            else:
                filename = self.storage.save(
                    image.data,
                    prefix="generated",
                    extension=_EXTENSIONS.get(image.mime_type, ".jpg"),
                )
                result = GenerationResult(
                    image_url=self.storage.public_url(filename),
                    style_photo_url=style_photo_ref,
                    description=GENERATED_DESCRIPTION,
                    outcome=Outcome.SUCCESS,
                )
                logger.info(
                    "Generated image stored",
                    extra={"session_id": session_id, "stored_filename": filename},
                )

        session = await self.session_store.append_result(session_id, result)
        return GenerationOutput(
            result=result,
            style_name=f"스타일 {len(session.generated_images)} 적용 결과",
            technical_specs=STATIC_TECHNICAL_SPECS.model_copy(deep=True),
        )

    async def _synthesize(
        self,
        session_id: str,
        hair_condition: HairCondition,
        customer_bytes: bytes,
        style_bytes: bytes,
    ) -> ImagePart | None:
        # Customer photo first, reference style second; the prompt relies on it.
        images = [
            ImagePart(data=customer_bytes, mime_type=detect_mime_type(customer_bytes)),
            ImagePart(data=style_bytes, mime_type=detect_mime_type(style_bytes)),
        ]
        sizes = {
            "session_id": session_id,
            "customer_bytes": len(customer_bytes),
            "style_bytes": len(style_bytes),
        }
        try:
            parts = await asyncio.wait_for(
                self.client.generate(
                    instruction=generation_prompt(hair_condition), images=images
                ),
                timeout=self.timeout_seconds,
            )
        except TimeoutError:
            logger.warning("Image generation timed out", extra=sizes)
            return None
        except Exception:
            logger.exception("Image generation call failed", extra=sizes)
            return None

        for part in parts:
            if part.image is not None:
                return part.image
            if part.text:
                logger.info(
                    "Image model commentary",
                    extra={"session_id": session_id, "text": part.text[:500]},
                )
        logger.warning(
            "Image model returned no image data",
            extra={
                **sizes,
                "part_count": len(parts),
                "text_parts": sum(1 for part in parts if part.text),
            },
        )
        return None
