"""OpenAI Responses API client for hairstyle image synthesis."""

import base64
import binascii
from dataclasses import dataclass

from openai import AsyncOpenAI

from hairstyle_studio.domain.images import ImagePart, detect_mime_type, to_data_url
from hairstyle_studio.errors import ExternalServiceError
from hairstyle_studio.services.generation import GenerationClient, ReplyPart


@dataclass
class OpenAIGenerationClient(GenerationClient):
    """Generation client using the Responses API image generation tool."""

    client: AsyncOpenAI
    model: str
    image_model: str
    store: bool

    @classmethod
    def create(
        cls, api_key: str, model: str, image_model: str, store: bool
    ) -> "OpenAIGenerationClient":
        """Create an OpenAI generation client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            image_model=image_model,
            store=store,
        )

    async def generate(
        self, *, instruction: str, images: list[ImagePart]
    ) -> list[ReplyPart]:
        """Send the instruction and images; return reply parts in order."""
        content: list[dict[str, object]] = [{"type": "input_text", "text": instruction}]
        content.extend(
            {"type": "input_image", "image_url": to_data_url(image)} for image in images
        )
        response = await self.client.responses.create(
            model=self.model,
            input=[{"role": "user", "content": content}],
            tools=[
                {
                    "type": "image_generation",
                    "model": self.image_model,
                    "output_format": "png",
                }
            ],
            store=self.store,
        )
        output = getattr(response, "output", None)
        if output is None:
            raise ExternalServiceError("OpenAI returned a response without output")

        parts: list[ReplyPart] = []
        for item in output:
            item_type = getattr(item, "type", None)
            if item_type == "image_generation_call":
                result = getattr(item, "result", None)
                if result:
                    parts.append(ReplyPart(image=_decode_image(result)))
            elif item_type == "message":
                for block in getattr(item, "content", None) or []:
                    text = getattr(block, "text", None)
                    if text:
                        parts.append(ReplyPart(text=text))
        return parts

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()


def _decode_image(encoded: str) -> ImagePart:
    try:
        data = base64.b64decode(encoded)
    except (binascii.Error, ValueError) as exc:
        raise ExternalServiceError("OpenAI returned undecodable image data") from exc
    return ImagePart(data=data, mime_type=detect_mime_type(data))
