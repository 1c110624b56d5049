"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import tzinfo
from pathlib import Path

from supabase import create_client

from nutritrack.adapters.file_storage import FileStorage
from nutritrack.adapters.memory_storage import InMemoryStorage
from nutritrack.adapters.openai_generative_client import OpenAIGenerativeClient
from nutritrack.adapters.supabase_storage import SupabaseStorage
from nutritrack.config import Settings, resolve_timezone
from nutritrack.services.estimation import EstimationService
from nutritrack.services.meals import KeyValueStorage, MealStore
from nutritrack.services.tips import TipService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    timezone: tzinfo | None
    meal_store: MealStore
    estimation_service: EstimationService
    tip_service: TipService
    close_resources: Callable[[], Awaitable[None]]


def build_storage(settings: Settings) -> KeyValueStorage:
    """Create the storage adapter selected by settings."""
    backend = settings.storage_backend.strip().lower()
    if backend == "file":
        return FileStorage(Path(settings.storage_dir))
    if backend == "memory":
        return InMemoryStorage()
    if backend == "supabase":
        if not settings.supabase_url or not settings.supabase_service_key:
            raise ValueError(
                "SUPABASE_URL and SUPABASE_SERVICE_KEY are required "
                "for the supabase storage backend"
            )
        client = create_client(settings.supabase_url, settings.supabase_service_key)
        return SupabaseStorage(client, table=settings.supabase_table)
    raise ValueError(f"Unknown storage backend: {settings.storage_backend}")


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    meal_store = MealStore(build_storage(resolved_settings))
    openai_client = OpenAIGenerativeClient.create(
        resolved_settings.openai_api_key,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    estimation_service = EstimationService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )
    tip_service = TipService(
        client=openai_client,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
        timeout_seconds=resolved_settings.openai_timeout_seconds,
    )

    async def close_resources() -> None:
        await openai_client.close()

    return AppContainer(
        settings=resolved_settings,
        timezone=resolve_timezone(resolved_settings.timezone),
        meal_store=meal_store,
        estimation_service=estimation_service,
        tip_service=tip_service,
        close_resources=close_resources,
    )
