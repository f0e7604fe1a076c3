"""Saved plant collection and care schedule."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import Protocol
from uuid import UUID

from plant_tracker.domain.identification import IdentificationResult
from plant_tracker.domain.plants import CareTask, SavedPlant
from plant_tracker.services.watering import build_care_tasks

_logger = logging.getLogger(__name__)


class PlantRepository(Protocol):
    """Persistence interface for saved plants, always scoped to one user."""

    def list_plants(
        self, user_id: UUID, order_by: str = "created_at", descending: bool = True
    ) -> list[SavedPlant]:
        """Return the user's plants in the requested order."""

    def create_plant(self, user_id: UUID, payload: dict[str, object]) -> SavedPlant:
        """Insert a plant row for the user and return it."""

    def update_last_watered(
        self, user_id: UUID, plant_id: UUID, watered_at: datetime
    ) -> SavedPlant | None:
        """Set the last watered timestamp; None when the plant is not found."""

    def delete_plant(self, user_id: UUID, plant_id: UUID) -> bool:
        """Delete a plant; False when nothing matched."""


@dataclass
class PlantCollectionService:
    """Application service for a user's saved plants."""

    repository: PlantRepository

    def list_plants(self, user_id: UUID) -> list[SavedPlant]:
        """Return the user's plants, newest first."""
        return self.repository.list_plants(user_id)

    def save_plant(
        self,
        user_id: UUID,
        result: IdentificationResult,
        image_url: str | None = None,
    ) -> SavedPlant:
        """Copy an identification result into the user's collection."""
        description = "\n\n".join(
            [result.about, result.explanation, "\n".join(result.additional_info)]
        )
        plant = self.repository.create_plant(
            user_id,
            {
                "common_name": result.common_name,
                "scientific_name": result.scientific_name,
                "description": description,
                "image_url": image_url,
                "watering_frequency_days": result.watering_frequency_days,
                "last_watered_at": datetime.now(tz=UTC).isoformat(),
            },
        )
        _logger.info("Saved plant %s for user %s", plant.id, user_id)
        return plant

    def water_plant(self, user_id: UUID, plant_id: UUID) -> SavedPlant | None:
        """Mark a plant as watered now."""
        return self.repository.update_last_watered(
            user_id, plant_id, datetime.now(tz=UTC)
        )

    def delete_plant(self, user_id: UUID, plant_id: UUID) -> bool:
        """Remove a plant from the collection."""
        return self.repository.delete_plant(user_id, plant_id)

    def list_care_tasks(
        self, user_id: UUID, now: datetime | None = None
    ) -> list[CareTask]:
        """Return watering tasks, most overdue first."""
        plants = self.repository.list_plants(
            user_id, order_by="last_watered_at", descending=False
        )
        return build_care_tasks(plants, now)
