"""ASGI entrypoint for the plant tracker API."""

from plant_tracker.api.app import create_app
from plant_tracker.containers import build_container

app = create_app(build_container())
