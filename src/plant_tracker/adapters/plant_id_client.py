"""Plant.id identification API client."""

from dataclasses import dataclass

import httpx

from plant_tracker.domain.errors import ConfigurationError, ParseFailure
from plant_tracker.domain.identification import (
    EncodedImage,
    ProviderKind,
    RawIdentificationResponse,
)
from plant_tracker.services.identification import IdentificationClient

PLANT_DETAILS = ["common_names", "taxonomy", "url", "description", "watering"]


@dataclass
class HttpxPlantIdClient(IdentificationClient):
    """HTTPX-backed Plant.id client."""

    api_key: str | None
    base_url: str
    http_client: httpx.AsyncClient
    timeout: float = 30

    @classmethod
    def create(cls, api_key: str | None, base_url: str) -> "HttpxPlantIdClient":
        """Create a Plant.id client with a managed httpx session."""
        return cls(api_key=api_key, base_url=base_url, http_client=httpx.AsyncClient())

    async def identify(self, image: EncodedImage) -> RawIdentificationResponse:
        """Submit the image and return the raw suggestions payload."""
        if not self.api_key:
            raise ConfigurationError("PLANT_ID_API_KEY not configured")
        response = await self.http_client.post(
            f"{self.base_url}/identify",
            headers={"Api-Key": self.api_key},
            json={
                "images": [image.base64],
                "modifiers": ["crops_fast", "similar_images"],
                "plant_language": "en",
                "plant_details": PLANT_DETAILS,
            },
            timeout=self.timeout,
        )
        response.raise_for_status()
        try:
            payload = response.json()
        except ValueError as exc:
            raise ParseFailure("Plant.id returned a non-JSON body") from exc
        return RawIdentificationResponse(
            provider=ProviderKind.PLANT_ID, payload=payload
        )

    async def close(self) -> None:
        """Close the underlying HTTP session."""
        await self.http_client.aclose()
