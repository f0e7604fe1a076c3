"""Watering schedule calculations shared by the dashboard and collection views."""

import math
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta

from plant_tracker.domain.plants import CareTask, SavedPlant

_ONE_DAY = timedelta(days=1)


def days_until_watering(
    last_watered_at: datetime, frequency_days: int, now: datetime | None = None
) -> int:
    """Return whole days until the next watering; zero or less means due.

    The next watering date keeps the wall-clock time of the last watering, so
    daylight saving shifts do not drift the schedule. Naive datetimes are
    treated as UTC.
    """
    current = _as_aware(now or datetime.now(tz=UTC))
    next_watering = _as_aware(last_watered_at) + timedelta(days=frequency_days)
    remaining = next_watering.astimezone(UTC) - current.astimezone(UTC)
    return math.ceil(remaining / _ONE_DAY)


def needs_water(days: int) -> bool:
    """Return True when a plant is due or overdue."""
    return days <= 0


def care_task_for(plant: SavedPlant, now: datetime | None = None) -> CareTask:
    """Derive the care task for a saved plant at the given time."""
    last_watered = plant.last_watered_at or plant.created_at
    days = days_until_watering(last_watered, plant.watering_frequency_days, now)
    return CareTask(
        plant=plant, days_until_watering=days, needs_water=needs_water(days)
    )


def build_care_tasks(
    plants: Iterable[SavedPlant], now: datetime | None = None
) -> list[CareTask]:
    """Build care tasks, most overdue first, keeping input order for ties."""
    resolved_now = now or datetime.now(tz=UTC)
    tasks = [care_task_for(plant, resolved_now) for plant in plants]
    return sorted(tasks, key=lambda task: task.days_until_watering)


def _as_aware(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value
