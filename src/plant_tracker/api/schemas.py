"""Pydantic models for API request and response bodies."""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from plant_tracker.domain.identification import IdentificationResult
from plant_tracker.domain.plants import CareTask, SavedPlant


class ImageRequest(BaseModel):
    """Body of the verify and identify endpoints."""

    image_base64: str | None = Field(default=None, alias="imageBase64")


class SavePlantRequest(IdentificationResult):
    """Identification result to copy into the collection, plus its image."""

    image_url: str | None = None

    def to_result(self) -> IdentificationResult:
        """Return the identification result part of the request."""
        return IdentificationResult.model_validate(
            self.model_dump(exclude={"image_url"})
        )


class SavedPlantResponse(BaseModel):
    """Saved plant as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: UUID
    user_id: UUID
    common_name: str
    scientific_name: str | None
    description: str | None
    image_url: str | None
    watering_frequency_days: int
    last_watered_at: datetime | None
    created_at: datetime

    @classmethod
    def from_domain(cls, plant: SavedPlant) -> "SavedPlantResponse":
        """Build the response model from a domain record."""
        return cls(
            id=plant.id,
            user_id=plant.user_id,
            common_name=plant.common_name,
            scientific_name=plant.scientific_name,
            description=plant.description,
            image_url=plant.image_url,
            watering_frequency_days=plant.watering_frequency_days,
            last_watered_at=plant.last_watered_at,
            created_at=plant.created_at,
        )


class CareTaskResponse(BaseModel):
    """Watering task as returned to clients."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    plant: SavedPlantResponse
    days_until_watering: int
    needs_water: bool

    @classmethod
    def from_domain(cls, task: CareTask) -> "CareTaskResponse":
        """Build the response model from a derived care task."""
        return cls(
            plant=SavedPlantResponse.from_domain(task.plant),
            days_until_watering=task.days_until_watering,
            needs_water=task.needs_water,
        )
