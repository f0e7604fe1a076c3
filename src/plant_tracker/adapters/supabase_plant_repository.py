"""Supabase-backed saved plant repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from plant_tracker.domain.plants import SavedPlant
from plant_tracker.services.plants import PlantRepository

_COLUMNS = (
    "id, user_id, common_name, scientific_name, description, image_url, "
    "watering_frequency_days, last_watered_at, created_at"
)


@dataclass
class SupabasePlantRepository(PlantRepository):
    """Supabase implementation for the plants table."""

    client: Client

    def list_plants(
        self, user_id: UUID, order_by: str = "created_at", descending: bool = True
    ) -> list[SavedPlant]:
        """Return the user's plants in the requested order."""
        response = (
            self.client.table("plants")
            .select(_COLUMNS)
            .eq("user_id", str(user_id))
            .order(order_by, desc=descending)
            .execute()
        )
        return [_parse_row(row) for row in response.data or []]

    def create_plant(self, user_id: UUID, payload: dict[str, object]) -> SavedPlant:
        """Insert a plant row and return it."""
        response = (
            self.client.table("plants")
            .insert({**payload, "user_id": str(user_id)})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create plant in Supabase")
        return _parse_row(response.data[0])

    def update_last_watered(
        self, user_id: UUID, plant_id: UUID, watered_at: datetime
    ) -> SavedPlant | None:
        """Set last_watered_at on one of the user's plants."""
        response = (
            self.client.table("plants")
            .update({"last_watered_at": watered_at.isoformat()})
            .eq("id", str(plant_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        if not response.data:
            return None
        return _parse_row(response.data[0])

    def delete_plant(self, user_id: UUID, plant_id: UUID) -> bool:
        """Delete one of the user's plants."""
        response = (
            self.client.table("plants")
            .delete()
            .eq("id", str(plant_id))
            .eq("user_id", str(user_id))
            .execute()
        )
        return bool(response.data)


def _parse_row(row: dict[str, object]) -> SavedPlant:
    return SavedPlant(
        id=UUID(str(row["id"])),
        user_id=UUID(str(row["user_id"])),
        common_name=str(row.get("common_name") or ""),
        scientific_name=row.get("scientific_name"),
        description=row.get("description"),
        image_url=row.get("image_url"),
        watering_frequency_days=int(row.get("watering_frequency_days") or 7),
        last_watered_at=_parse_timestamp(row.get("last_watered_at")),
        created_at=_parse_timestamp(row.get("created_at")) or datetime.now(tz=UTC),
    )


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return None
