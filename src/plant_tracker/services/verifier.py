"""Pre-flight check that an image contains a plant."""

import json
import logging
import math
from dataclasses import dataclass
from typing import Protocol

from plant_tracker.domain.errors import ConfigurationError
from plant_tracker.domain.identification import EncodedImage, VerificationOutcome
from plant_tracker.services.confidence import DEFAULT_CONFIDENCE_THRESHOLD
from plant_tracker.services.parsing import as_bool, extract_json_object

VERIFY_PROMPT = (
    "Analyze this image and determine if it contains a plant, leaf, flower, "
    "tree, or any botanical subject. Respond with ONLY a JSON object in this "
    'exact format: {"isPlant": true/false, "confidence": 0.0-1.0}. '
    "Do not include any other text or explanation."
)
PLANT_KEYWORDS = ("true", "plant", "leaf", "flower")

_logger = logging.getLogger(__name__)


class VisionClient(Protocol):
    """Interface for a vision-capable chat completion model."""

    async def complete(
        self,
        *,
        model: str,
        prompt: str,
        image_data_url: str,
        max_tokens: int | None = None,
    ) -> str:
        """Return the text content of the model's reply."""


@dataclass
class PlantVerifier:
    """Asks a vision model whether an image shows a plant.

    Failures never reach the caller: any transport or provider error yields a
    permissive fallback outcome so identification can still go ahead.
    """

    client: VisionClient
    model: str
    threshold: float = DEFAULT_CONFIDENCE_THRESHOLD
    max_tokens: int = 100

    async def verify(self, image: EncodedImage) -> VerificationOutcome:
        """Classify the image, failing open on any provider error."""
        try:
            content = await self.client.complete(
                model=self.model,
                prompt=VERIFY_PROMPT,
                image_data_url=image.data_url,
                max_tokens=self.max_tokens,
            )
        except ConfigurationError:
            raise
        except Exception:
            _logger.exception("Plant verification call failed, proceeding anyway")
            return self.fallback()

        if not content.strip():
            _logger.warning("Plant verification returned an empty reply")
            return self.fallback()
        outcome = self.parse(content)
        _logger.info(
            "Plant verification: is_plant=%s confidence=%.2f",
            outcome.is_plant,
            outcome.confidence,
        )
        return outcome

    def parse(self, content: str) -> VerificationOutcome:
        """Parse the classifier reply.

        A reply without a JSON object is treated as a plant. Malformed JSON falls
        back to a keyword check on the raw text.
        """
        try:
            data = extract_json_object(content)
        except json.JSONDecodeError:
            _logger.warning("Could not parse verification reply as JSON")
            lowered = content.lower()
            return VerificationOutcome(
                is_plant=any(keyword in lowered for keyword in PLANT_KEYWORDS),
                confidence=self.threshold,
            )
        if data is None:
            _logger.warning("Verification reply has no JSON object")
            return VerificationOutcome(is_plant=True, confidence=self.threshold)
        return VerificationOutcome(
            is_plant=as_bool(data.get("isPlant", data.get("is_plant")), default=True),
            confidence=_clamp(data.get("confidence"), default=self.threshold),
        )

    def fallback(self) -> VerificationOutcome:
        """Return the permissive outcome used when the classifier is unavailable."""
        return VerificationOutcome(
            is_plant=True, confidence=self.threshold, fallback=True
        )


def _clamp(value: object, *, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return default
    if not math.isfinite(value):
        return default
    return min(max(float(value), 0.0), 1.0)
