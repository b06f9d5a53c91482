"""OpenAI Responses API client for photo analysis."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from hairstyle_studio.domain.images import ImagePart, to_data_url
from hairstyle_studio.errors import ExternalServiceError
from hairstyle_studio.services.analysis import AnalysisClient


@dataclass
class OpenAIAnalysisClient(AnalysisClient):
    """Analysis client backed by OpenAI Responses API."""

    client: AsyncOpenAI
    model: str
    reasoning_effort: str | None
    store: bool

    @classmethod
    def create(
        cls, api_key: str, model: str, reasoning_effort: str | None, store: bool
    ) -> "OpenAIAnalysisClient":
        """Create an OpenAI analysis client."""
        return cls(
            client=AsyncOpenAI(api_key=api_key),
            model=model,
            reasoning_effort=reasoning_effort,
            store=store,
        )

    async def analyze(self, *, instruction: str, images: list[ImagePart]) -> str:
        """Send the images followed by the instruction; return the text answer."""
        content: list[dict[str, object]] = [
            {"type": "input_image", "image_url": to_data_url(image)} for image in images
        ]
        content.append({"type": "input_text", "text": instruction})
        request_payload: dict[str, object] = {
            "model": self.model,
            "input": [{"role": "user", "content": content}],
            "store": self.store,
        }
        if self.reasoning_effort:
            request_payload["reasoning"] = {"effort": self.reasoning_effort}

        response = await self.client.responses.create(**request_payload)
        output_text = response.output_text
        if not output_text:
            raise ExternalServiceError("OpenAI returned an empty response")
        return output_text

    async def close(self) -> None:
        """Close the underlying OpenAI client."""
        await self.client.close()
