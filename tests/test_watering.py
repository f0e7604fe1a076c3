"""Tests for watering schedule calculations."""

from datetime import UTC, datetime, timedelta
from zoneinfo import ZoneInfo

from plant_tracker.services.watering import (
    build_care_tasks,
    care_task_for,
    days_until_watering,
    needs_water,
)
from tests.conftest import make_plant

NOW = datetime(2026, 6, 15, 9, 30, tzinfo=UTC)


def test_watered_one_cycle_ago_is_due_today() -> None:
    assert days_until_watering(NOW - timedelta(days=7), 7, now=NOW) == 0


def test_overdue_plant_has_negative_days() -> None:
    assert days_until_watering(NOW - timedelta(days=10), 7, now=NOW) == -3


def test_just_watered_plant_waits_full_cycle() -> None:
    assert days_until_watering(NOW, 7, now=NOW) == 7


def test_partial_days_round_up() -> None:
    last_watered = NOW - timedelta(days=2, hours=5)

    assert days_until_watering(last_watered, 7, now=NOW) == 5


def test_naive_timestamps_are_treated_as_utc() -> None:
    naive = (NOW - timedelta(days=3)).replace(tzinfo=None)

    assert days_until_watering(naive, 7, now=NOW) == 4


def test_calendar_days_ignore_daylight_saving_shift() -> None:
    berlin = ZoneInfo("Europe/Berlin")
    last_watered = datetime(2026, 3, 27, 8, 0, tzinfo=berlin)
    now = datetime(2026, 3, 30, 8, 0, tzinfo=berlin)

    assert days_until_watering(last_watered, 3, now=now) == 0


def test_needs_water_when_due_or_overdue() -> None:
    assert needs_water(0) is True
    assert needs_water(-2) is True
    assert needs_water(1) is False


def test_care_task_falls_back_to_created_at() -> None:
    plant = make_plant(last_watered_at=None, created_at=NOW - timedelta(days=9))

    task = care_task_for(plant, now=NOW)

    assert task.days_until_watering == -2
    assert task.needs_water is True


def test_care_tasks_sorted_most_overdue_first_with_stable_ties() -> None:
    fern = make_plant(common_name="Fern", last_watered_at=NOW - timedelta(days=1))
    cactus = make_plant(common_name="Cactus", last_watered_at=NOW - timedelta(days=10))
    ivy = make_plant(common_name="Ivy", last_watered_at=NOW - timedelta(days=1))
    basil = make_plant(
        common_name="Basil",
        watering_frequency_days=2,
        last_watered_at=NOW - timedelta(days=2),
    )

    tasks = build_care_tasks([fern, cactus, ivy, basil], now=NOW)

    assert [task.plant.common_name for task in tasks] == [
        "Cactus",
        "Basil",
        "Fern",
        "Ivy",
    ]
    assert [task.days_until_watering for task in tasks] == [-3, 0, 6, 6]
