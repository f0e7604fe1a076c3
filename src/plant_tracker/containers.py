"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from plant_tracker.adapters.openai_vision_client import OpenAIVisionClient
from plant_tracker.adapters.plant_id_client import HttpxPlantIdClient
from plant_tracker.adapters.supabase_auth_client import SupabaseAuthClient
from plant_tracker.adapters.supabase_plant_repository import SupabasePlantRepository
from plant_tracker.config import Settings
from plant_tracker.services.confidence import ConfidenceGate
from plant_tracker.services.identification import (
    IdentificationClient,
    IdentificationService,
    LlmIdentificationClient,
)
from plant_tracker.services.plants import PlantCollectionService
from plant_tracker.services.users import UserService
from plant_tracker.services.verifier import PlantVerifier


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    identification_service: IdentificationService
    plant_service: PlantCollectionService
    user_service: UserService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    vision_client = OpenAIVisionClient.create(
        api_key=resolved_settings.ai_gateway_api_key,
        base_url=resolved_settings.ai_gateway_base_url,
    )
    plant_id_client = HttpxPlantIdClient.create(
        api_key=resolved_settings.plant_id_api_key,
        base_url=resolved_settings.plant_id_base_url,
    )
    provider: IdentificationClient
    if resolved_settings.identification_provider == "llm":
        provider = LlmIdentificationClient(
            client=vision_client, model=resolved_settings.identification_model
        )
    else:
        provider = plant_id_client
    identification_service = IdentificationService(
        verifier=PlantVerifier(
            client=vision_client,
            model=resolved_settings.verifier_model,
            threshold=resolved_settings.confidence_threshold,
        ),
        provider=provider,
        gate=ConfidenceGate(threshold=resolved_settings.confidence_threshold),
    )
    plant_service = PlantCollectionService(SupabasePlantRepository(supabase_client))
    user_service = UserService(SupabaseAuthClient(supabase_client))

    async def close_resources() -> None:
        await plant_id_client.close()
        await vision_client.close()

    return AppContainer(
        settings=resolved_settings,
        identification_service=identification_service,
        plant_service=plant_service,
        user_service=user_service,
        close_resources=close_resources,
    )
