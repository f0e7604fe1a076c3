"""Normalization of provider payloads into the canonical identification result."""

import json
import math
from dataclasses import dataclass
from typing import Protocol

from plant_tracker.domain.errors import ParseFailure
from plant_tracker.domain.identification import IdentificationResult, ProviderKind
from plant_tracker.services.parsing import as_bool, extract_json_object

DEFAULT_COMMON_NAME = "Unknown Plant"
DEFAULT_SCIENTIFIC_NAME = "Species unknown"
DEFAULT_DESCRIPTION = "No description available."
DEFAULT_WATERING_DAYS = 7
DEFAULT_PROBABILITY = 0.8
DEFAULT_SUNLIGHT = "Moderate to bright indirect light"
DEFAULT_SOIL = "Well-draining potting mix"
DEFAULT_GROWTH = "Moderate growth rate"
DEFAULT_NATIVE = "Varies by species"

_SENTENCE_SEPARATOR = ". "
_ABOUT_SENTENCES = 2
_EXPLANATION_SENTENCES = 4


class ResponseNormalizer(Protocol):
    """Turns one provider's raw payload into an IdentificationResult."""

    def normalize(self, payload: dict[str, object] | str) -> IdentificationResult:
        """Return the canonical result or raise ParseFailure."""


@dataclass(frozen=True)
class PlantIdNormalizer(ResponseNormalizer):
    """Normalizer for Plant.id style `suggestions` payloads."""

    def normalize(self, payload: dict[str, object] | str) -> IdentificationResult:
        """Map the top suggestion field-for-field onto the canonical result."""
        if not isinstance(payload, dict):
            raise ParseFailure("Plant.id payload is not a JSON object")
        suggestions = payload.get("suggestions")
        if not isinstance(suggestions, list) or not suggestions:
            raise ParseFailure("Plant.id payload has no suggestions")
        top = suggestions[0]
        if not isinstance(top, dict):
            raise ParseFailure("Plant.id suggestion is not a JSON object")

        details = _as_dict(top.get("plant_details"))
        scientific_name = _text(top.get("plant_name"))
        common_names = details.get("common_names")
        common_name = None
        if isinstance(common_names, list) and common_names:
            common_name = _text(common_names[0])

        description = _text(_as_dict(details.get("description")).get("value"))
        about, explanation = split_description(description or DEFAULT_DESCRIPTION)
        watering = _positive_int(_as_dict(details.get("watering")).get("max"))
        watering_days = watering or DEFAULT_WATERING_DAYS

        return IdentificationResult(
            common_name=common_name or scientific_name or DEFAULT_COMMON_NAME,
            scientific_name=scientific_name or DEFAULT_SCIENTIFIC_NAME,
            about=about,
            explanation=explanation,
            additional_info=care_facts(
                watering_days,
                sunlight=_text(details.get("sunlight")),
                soil=_text(details.get("soil")),
                growth=_text(details.get("growth_rate")),
                native=_text(details.get("native")),
            ),
            watering_frequency_days=watering_days,
            probability=_probability(top.get("probability")),
        )


@dataclass(frozen=True)
class LlmNormalizer(ResponseNormalizer):
    """Normalizer for LLM completions with a JSON object embedded in prose."""

    def normalize(self, payload: dict[str, object] | str) -> IdentificationResult:
        """Extract the JSON object from the completion and fill in defaults."""
        if isinstance(payload, dict):
            data = payload
        else:
            try:
                data = extract_json_object(payload)
            except json.JSONDecodeError as exc:
                raise ParseFailure(f"Malformed JSON in completion: {exc}") from exc
            if data is None:
                raise ParseFailure("No JSON object found in completion")

        about = _text(_field(data, "about"))
        explanation = _text(_field(data, "explanation"))
        if not about and not explanation:
            description = _text(_field(data, "description")) or DEFAULT_DESCRIPTION
            about, explanation = split_description(description)
        elif not about:
            about, _ = split_description(explanation)
        elif not explanation:
            explanation = about

        watering_days = (
            _positive_int(_field(data, "wateringFrequencyDays"))
            or DEFAULT_WATERING_DAYS
        )
        additional_info = _string_list(_field(data, "additionalInfo")) or care_facts(
            watering_days
        )
        if not as_bool(data.get("identified"), default=True):
            probability = 0.0
        else:
            raw_probability = _field(data, "probability")
            if raw_probability is None:
                raw_probability = data.get("confidence")
            probability = _probability(raw_probability)

        scientific_name = _text(_field(data, "scientificName"))
        return IdentificationResult(
            common_name=_text(_field(data, "commonName")) or DEFAULT_COMMON_NAME,
            scientific_name=scientific_name or DEFAULT_SCIENTIFIC_NAME,
            about=about,
            explanation=explanation,
            additional_info=additional_info,
            watering_frequency_days=watering_days,
            probability=probability,
        )


_NORMALIZERS: dict[ProviderKind, ResponseNormalizer] = {
    ProviderKind.PLANT_ID: PlantIdNormalizer(),
    ProviderKind.LLM: LlmNormalizer(),
}


def normalizer_for(provider: ProviderKind) -> ResponseNormalizer:
    """Return the normalizer registered for a provider."""
    return _NORMALIZERS[provider]


def split_description(description: str) -> tuple[str, str]:
    """Split a long description into an about and an explanation segment.

    About is the first two sentences; explanation is the next four, or the
    about text when the description is too short to have any.
    """
    sentences = [part for part in description.split(_SENTENCE_SEPARATOR) if part]
    about = _join_sentences(sentences[:_ABOUT_SENTENCES]) or DEFAULT_DESCRIPTION
    explanation = _join_sentences(
        sentences[_ABOUT_SENTENCES : _ABOUT_SENTENCES + _EXPLANATION_SENTENCES]
    )
    return about, explanation or about


def care_facts(
    watering_days: int,
    *,
    sunlight: str | None = None,
    soil: str | None = None,
    growth: str | None = None,
    native: str | None = None,
) -> list[str]:
    """Build the fixed-order list of care facts shown with a result."""
    return [
        f"Watering: Every {watering_days} days",
        f"Sunlight: {sunlight or DEFAULT_SUNLIGHT}",
        f"Soil: {soil or DEFAULT_SOIL}",
        f"Growth: {growth or DEFAULT_GROWTH}",
        f"Native: {native or DEFAULT_NATIVE}",
    ]


def _join_sentences(sentences: list[str]) -> str:
    text = _SENTENCE_SEPARATOR.join(sentence.strip() for sentence in sentences)
    text = text.strip()
    if text and not text.endswith((".", "!", "?")):
        text += "."
    return text


def _field(data: dict[str, object], camel_key: str) -> object | None:
    """Read a camelCase key, falling back to its snake_case spelling."""
    if camel_key in data:
        return data[camel_key]
    snake_key = "".join(f"_{ch.lower()}" if ch.isupper() else ch for ch in camel_key)
    return data.get(snake_key)


def _as_dict(value: object) -> dict[str, object]:
    return value if isinstance(value, dict) else {}


def _text(value: object) -> str | None:
    if isinstance(value, list):
        value = ", ".join(str(item) for item in value if item)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def _string_list(value: object) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item.strip() for item in value if isinstance(item, str) and item.strip()]


def _positive_int(value: object) -> int | None:
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return None
    try:
        number = float(value)
    except ValueError:
        return None
    if not math.isfinite(number) or number < 1:
        return None
    return round(number)


def _probability(value: object) -> float:
    if isinstance(value, bool) or not isinstance(value, int | float | str):
        return DEFAULT_PROBABILITY
    try:
        number = float(value)
    except ValueError:
        return DEFAULT_PROBABILITY
    if not math.isfinite(number):
        return DEFAULT_PROBABILITY
    return min(max(number, 0.0), 1.0)
