"""Identification pipeline: verify, identify, normalize, gate."""

import logging
from dataclasses import dataclass, field
from typing import Protocol

import httpx
import openai

from plant_tracker.domain.errors import ParseFailure
from plant_tracker.domain.identification import (
    EncodedImage,
    IdentificationOutcome,
    LowConfidence,
    NotAPlant,
    ProviderKind,
    RawIdentificationResponse,
    Success,
    TransientError,
    VerificationOutcome,
)
from plant_tracker.services.confidence import ConfidenceGate, Rejected
from plant_tracker.services.images import encode_image
from plant_tracker.services.normalizer import normalizer_for
from plant_tracker.services.verifier import PlantVerifier, VisionClient

IDENTIFY_PROMPT = (
    "Identify the plant in this image. Respond with a JSON object with the keys "
    '"identified" (boolean), "commonName", "scientificName", "about" '
    '(1-2 sentences), "explanation" (3-4 sentences), "additionalInfo" '
    '(list of short care facts), "wateringFrequencyDays" (integer) and '
    '"probability" (0.0-1.0). If no plant can be identified, set '
    '"identified" to false.'
)

_TRANSIENT_ERRORS = (httpx.HTTPError, openai.APIError)

_logger = logging.getLogger(__name__)


class IdentificationClient(Protocol):
    """Interface for an external plant identification provider."""

    async def identify(self, image: EncodedImage) -> RawIdentificationResponse:
        """Return the provider's raw payload tagged with its provider kind."""


@dataclass
class LlmIdentificationClient(IdentificationClient):
    """Identification provider backed by a vision chat completion model."""

    client: VisionClient
    model: str
    max_tokens: int | None = None

    async def identify(self, image: EncodedImage) -> RawIdentificationResponse:
        """Ask the model to identify the plant and return its raw reply."""
        content = await self.client.complete(
            model=self.model,
            prompt=IDENTIFY_PROMPT,
            image_data_url=image.data_url,
            max_tokens=self.max_tokens,
        )
        return RawIdentificationResponse(provider=ProviderKind.LLM, payload=content)


@dataclass
class IdentificationService:
    """Runs one identification attempt and maps it to a single outcome.

    The identification provider is never called when the verifier positively
    rejects the image. Malformed provider output counts as low confidence,
    while transport faults become transient errors. Nothing is retried.
    """

    verifier: PlantVerifier
    provider: IdentificationClient
    gate: ConfidenceGate = field(default_factory=ConfidenceGate)

    async def identify(self, image_bytes: bytes) -> IdentificationOutcome:
        """Identify the plant in raw image bytes."""
        return await self.identify_encoded(encode_image(image_bytes))

    async def verify(self, image: EncodedImage) -> VerificationOutcome:
        """Run only the verification step."""
        return await self.verifier.verify(image)

    async def identify_encoded(self, image: EncodedImage) -> IdentificationOutcome:
        """Identify the plant in an already encoded image."""
        verification = await self.verifier.verify(image)
        if not verification.is_plant and not verification.fallback:
            _logger.info(
                "Image rejected as not a plant (confidence=%.2f)",
                verification.confidence,
            )
            return NotAPlant(confidence=verification.confidence)

        try:
            raw = await self.provider.identify(image)
        except _TRANSIENT_ERRORS as exc:
            status_code = _status_code_from_exception(exc)
            _logger.warning(
                "Identification provider failed (status=%s): %s", status_code, exc
            )
            return TransientError(
                message=f"{type(exc).__name__}: {exc}", status_code=status_code
            )
        except ParseFailure as exc:
            _logger.warning("Identification provider returned garbage: %s", exc)
            return LowConfidence()

        try:
            result = normalizer_for(raw.provider).normalize(raw.payload)
        except ParseFailure as exc:
            _logger.warning("Could not parse %s response: %s", raw.provider, exc)
            return LowConfidence()

        decision = self.gate.evaluate(result)
        if isinstance(decision, Rejected):
            _logger.info(
                "Identification below threshold: probability=%.2f",
                decision.probability,
            )
            return LowConfidence(probability=decision.probability)

        _logger.info(
            "Identified %s (%s) probability=%.2f",
            result.common_name,
            result.scientific_name,
            result.probability,
        )
        return Success(result=result)


def _status_code_from_exception(exc: Exception) -> int | None:
    """Extract an HTTP status code from a client exception, if available."""
    status_code = getattr(exc, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    response = getattr(exc, "response", None)
    status_code = getattr(response, "status_code", None)
    if isinstance(status_code, int):
        return status_code
    return None
