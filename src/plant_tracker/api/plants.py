"""Collection endpoints scoped to the authenticated user."""

from __future__ import annotations

from typing import TYPE_CHECKING
from uuid import UUID

from fastapi import APIRouter, Depends, Header, HTTPException, Request, Response, status

from plant_tracker.api.schemas import (
    CareTaskResponse,
    SavedPlantResponse,
    SavePlantRequest,
)

if TYPE_CHECKING:
    from plant_tracker.containers import AppContainer

router = APIRouter(tags=["plants"])


def _container(request: Request) -> AppContainer:
    return request.app.state.container


async def require_user(
    request: Request, authorization: str | None = Header(default=None)
) -> UUID:
    """Resolve the bearer token to a user id or reject the request."""
    user_id = _container(request).user_service.resolve_user(authorization)
    if user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)
    return user_id


@router.get("/plants")
async def list_plants(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return the user's saved plants, newest first."""
    plants = _container(request).plant_service.list_plants(user_id)
    return {
        "plants": [
            SavedPlantResponse.from_domain(plant).model_dump(
                mode="json", by_alias=True
            )
            for plant in plants
        ]
    }


@router.post("/plants", status_code=status.HTTP_201_CREATED)
async def save_plant(
    body: SavePlantRequest, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Save an identification result to the user's collection."""
    plant = _container(request).plant_service.save_plant(
        user_id, body.to_result(), image_url=body.image_url
    )
    return SavedPlantResponse.from_domain(plant).model_dump(mode="json", by_alias=True)


@router.post("/plants/{plant_id}/water")
async def water_plant(
    plant_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Record that a plant was watered now."""
    plant = _container(request).plant_service.water_plant(user_id, plant_id)
    if plant is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return SavedPlantResponse.from_domain(plant).model_dump(mode="json", by_alias=True)


@router.delete("/plants/{plant_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_plant(
    plant_id: UUID, request: Request, user_id: UUID = Depends(require_user)
) -> Response:
    """Remove a plant from the user's collection."""
    if not _container(request).plant_service.delete_plant(user_id, plant_id):
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/care-tasks")
async def list_care_tasks(
    request: Request, user_id: UUID = Depends(require_user)
) -> dict[str, object]:
    """Return watering tasks, most overdue first."""
    tasks = _container(request).plant_service.list_care_tasks(user_id)
    return {
        "tasks": [
            CareTaskResponse.from_domain(task).model_dump(mode="json", by_alias=True)
            for task in tasks
        ],
        "overdueCount": sum(1 for task in tasks if task.needs_water),
    }
