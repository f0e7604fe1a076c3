"""OpenAI-compatible chat completions client for vision prompts."""

from dataclasses import dataclass

from openai import AsyncOpenAI

from plant_tracker.domain.errors import ConfigurationError
from plant_tracker.services.verifier import VisionClient


@dataclass
class OpenAIVisionClient(VisionClient):
    """Vision client backed by an OpenAI-compatible AI gateway."""

    client: AsyncOpenAI | None

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "OpenAIVisionClient":
        """Create a gateway client; without a key every call raises."""
        if not api_key:
            return cls(client=None)
        return cls(client=AsyncOpenAI(api_key=api_key, base_url=base_url))

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int | None = None,
    ) -> str:
        """Send the prompt with the image and return the reply text."""
        if self.client is None:
            raise ConfigurationError("AI_GATEWAY_API_KEY not configured")
        request_payload: dict[str, object] = {
            "model": model,
            "messages": [
                {
                    "role": "user",
                    "content": [
                        {"type": "text", "text": prompt},
                        {"type": "image_url", "image_url": {"url": image_data_url}},
                    ],
                }
            ],
        }
        if max_tokens:
            request_payload["max_tokens"] = max_tokens

        response = await self.client.chat.completions.create(**request_payload)
        if not response.choices:
            return ""
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        if self.client is not None:
            await self.client.close()
