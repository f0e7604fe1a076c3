"""Models for plant verification and identification results."""

from dataclasses import dataclass
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class VerificationOutcome(_CamelModel):
    """Answer to "does this image contain a plant at all?"."""

    is_plant: bool
    confidence: float = Field(ge=0.0, le=1.0)
    fallback: bool = False


class IdentificationResult(_CamelModel):
    """Canonical identification result shared by every provider."""

    common_name: str = Field(min_length=1)
    scientific_name: str = Field(min_length=1)
    about: str = Field(min_length=1)
    explanation: str = Field(min_length=1)
    additional_info: list[str] = Field(min_length=1)
    watering_frequency_days: int = Field(gt=0)
    probability: float = Field(ge=0.0, le=1.0)


class ProviderKind(StrEnum):
    """Identification providers with distinct response shapes."""

    PLANT_ID = "plant_id"
    LLM = "llm"


@dataclass(frozen=True)
class EncodedImage:
    """Image encoded once per request and shared by outbound calls."""

    base64: str
    mime_type: str

    @property
    def data_url(self) -> str:
        """Return the image as a data URL for vision model inputs."""
        return f"data:{self.mime_type};base64,{self.base64}"


@dataclass(frozen=True)
class RawIdentificationResponse:
    """Provider payload tagged with the provider that produced it."""

    provider: ProviderKind
    payload: dict[str, object] | str


@dataclass(frozen=True)
class Success:
    """Identification accepted by the confidence gate."""

    result: IdentificationResult


@dataclass(frozen=True)
class NotAPlant:
    """Verifier rejected the image before identification."""

    confidence: float


@dataclass(frozen=True)
class LowConfidence:
    """Result was unparseable or below the confidence threshold."""

    probability: float | None = None


@dataclass(frozen=True)
class TransientError:
    """Network or provider fault; the caller may retry manually."""

    message: str
    status_code: int | None = None


IdentificationOutcome = Success | NotAPlant | LowConfidence | TransientError
