"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from hairstyle_studio.adapters.httpx_image_fetcher import HttpxImageFetcher
from hairstyle_studio.adapters.local_image_storage import LocalImageStorage
from hairstyle_studio.adapters.openai_analysis_client import OpenAIAnalysisClient
from hairstyle_studio.adapters.openai_generation_client import (
    OpenAIGenerationClient,
)
from hairstyle_studio.config import Settings, load_analysis_defaults
from hairstyle_studio.services.analysis import AnalysisService
from hairstyle_studio.services.generation import GenerationService
from hairstyle_studio.services.images import (
    ImageSourceResolver,
    ImageStorage,
    local_prefixes,
)
from hairstyle_studio.services.sessions import SessionStore
from hairstyle_studio.services.uploads import UploadService


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    storage: ImageStorage
    session_store: SessionStore
    upload_service: UploadService
    generation_service: GenerationService
    analysis_service: AnalysisService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    storage = LocalImageStorage.create(
        resolved_settings.uploads_dir, resolved_settings.public_base_url
    )
    session_store = SessionStore()
    fetcher = HttpxImageFetcher.create(resolved_settings.remote_fetch_timeout_seconds)
    resolver = ImageSourceResolver(
        storage=storage,
        fetcher=fetcher,
        local_prefixes=local_prefixes(resolved_settings.public_base_url),
    )
    generation_client = OpenAIGenerationClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        image_model=resolved_settings.openai_image_model,
        store=resolved_settings.openai_store,
    )
    analysis_client = OpenAIAnalysisClient.create(
        api_key=resolved_settings.openai_api_key,
        model=resolved_settings.openai_model,
        reasoning_effort=resolved_settings.openai_reasoning_effort,
        store=resolved_settings.openai_store,
    )
    upload_service = UploadService(
        storage=storage,
        session_store=session_store,
        max_upload_bytes=resolved_settings.max_upload_bytes,
    )
    generation_service = GenerationService(
        client=generation_client,
        resolver=resolver,
        storage=storage,
        session_store=session_store,
        timeout_seconds=resolved_settings.external_call_timeout_seconds,
    )
    analysis_service = AnalysisService(
        client=analysis_client,
        resolver=resolver,
        timeout_seconds=resolved_settings.external_call_timeout_seconds,
        defaults=load_analysis_defaults(resolved_settings.analysis_defaults_file),
    )

    async def close_resources() -> None:
        await session_store.clear()
        await fetcher.close()
        await generation_client.close()
        await analysis_client.close()

    return AppContainer(
        settings=resolved_settings,
        storage=storage,
        session_store=session_store,
        upload_service=upload_service,
        generation_service=generation_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
