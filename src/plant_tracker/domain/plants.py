"""Domain models for saved plants and care tasks."""

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class SavedPlant:
    """Plant stored in a user's collection."""

    id: UUID
    user_id: UUID
    common_name: str
    scientific_name: str | None
    description: str | None
    image_url: str | None
    watering_frequency_days: int
    last_watered_at: datetime | None
    created_at: datetime


@dataclass(frozen=True)
class CareTask:
    """Watering status derived from a saved plant at read time."""

    plant: SavedPlant
    days_until_watering: int
    needs_water: bool
