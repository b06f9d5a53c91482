"""Shared test fixtures."""

from dataclasses import dataclass, field
from pathlib import Path

import pytest

from hairstyle_studio.adapters.local_image_storage import LocalImageStorage
from hairstyle_studio.config import Settings
from hairstyle_studio.containers import AppContainer
from hairstyle_studio.domain.analysis import AnalysisDefaults
from hairstyle_studio.domain.hair import HairCondition
from hairstyle_studio.domain.images import ImagePart
from hairstyle_studio.services.analysis import AnalysisClient, AnalysisService
from hairstyle_studio.services.generation import (
    GenerationClient,
    GenerationService,
    ReplyPart,
)
from hairstyle_studio.services.images import (
    ImageFetcher,
    ImageSourceResolver,
    local_prefixes,
)
from hairstyle_studio.services.sessions import SessionStore
from hairstyle_studio.services.uploads import UploadService

PUBLIC_BASE_URL = "http://localhost:3000"
CUSTOMER_PNG = b"\x89PNG\r\n\x1a\n" + b"customer-photo"
STYLE_JPEG = b"\xff\xd8\xff" + b"style-photo"
GENERATED_PNG = b"\x89PNG\r\n\x1a\n" + b"generated-photo"


@dataclass
class FakeGenerationClient(GenerationClient):
    """Fake generation client returning fixed reply parts."""

    parts: list[ReplyPart] = field(
        default_factory=lambda: [
            ReplyPart(text="Here is the restyled photo."),
            ReplyPart(image=ImagePart(data=GENERATED_PNG, mime_type="image/png")),
        ]
    )
    error: Exception | None = None
    calls: list[tuple[str, list[ImagePart]]] = field(default_factory=list)

    async def generate(
        self, *, instruction: str, images: list[ImagePart]
    ) -> list[ReplyPart]:
        self.calls.append((instruction, images))
        if self.error is not None:
            raise self.error
        return self.parts


@dataclass
class FakeAnalysisClient(AnalysisClient):
    """Fake analysis client returning a fixed text answer."""

    reply: str = "I cannot determine this."
    error: Exception | None = None
    calls: list[tuple[str, list[ImagePart]]] = field(default_factory=list)

    async def analyze(self, *, instruction: str, images: list[ImagePart]) -> str:
        self.calls.append((instruction, images))
        if self.error is not None:
            raise self.error
        return self.reply


@dataclass
class FakeImageFetcher(ImageFetcher):
    """Fake fetcher serving bytes from an in-memory URL map."""

    images: dict[str, bytes] = field(default_factory=dict)
    requested: list[str] = field(default_factory=list)

    async def fetch(self, url: str) -> bytes | None:
        self.requested.append(url)
        return self.images.get(url)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    return Settings(
        openai_api_key="openai-key",
        public_base_url=PUBLIC_BASE_URL,
        uploads_dir=tmp_path / "uploads",
        max_upload_bytes=1024,
        external_call_timeout_seconds=5.0,
    )


@pytest.fixture
def storage(settings: Settings) -> LocalImageStorage:
    return LocalImageStorage.create(settings.uploads_dir, settings.public_base_url)


@pytest.fixture
def session_store() -> SessionStore:
    return SessionStore()


@pytest.fixture
def fetcher() -> FakeImageFetcher:
    return FakeImageFetcher()


@pytest.fixture
def resolver(
    storage: LocalImageStorage, fetcher: FakeImageFetcher
) -> ImageSourceResolver:
    return ImageSourceResolver(
        storage=storage,
        fetcher=fetcher,
        local_prefixes=local_prefixes(PUBLIC_BASE_URL),
    )


@pytest.fixture
def generation_client() -> FakeGenerationClient:
    return FakeGenerationClient()


@pytest.fixture
def analysis_client() -> FakeAnalysisClient:
    return FakeAnalysisClient()


@pytest.fixture
def generation_service(
    generation_client: FakeGenerationClient,
    resolver: ImageSourceResolver,
    storage: LocalImageStorage,
    session_store: SessionStore,
) -> GenerationService:
    return GenerationService(
        client=generation_client,
        resolver=resolver,
        storage=storage,
        session_store=session_store,
        timeout_seconds=5.0,
    )


@pytest.fixture
def analysis_service(
    analysis_client: FakeAnalysisClient, resolver: ImageSourceResolver
) -> AnalysisService:
    return AnalysisService(
        client=analysis_client,
        resolver=resolver,
        timeout_seconds=5.0,
        defaults=AnalysisDefaults(),
    )


@pytest.fixture
def hair_condition() -> HairCondition:
    return HairCondition.model_validate(
        {
            "curlPattern": "2B wavy",
            "strandTexture": "fine",
            "density": "medium",
            "scalpCondition": "oily",
            "chemicalHistory": {"henna": True, "boxDye": False, "bleach": "2 months"},
        }
    )


def store_photo(storage: LocalImageStorage, data: bytes, prefix: str) -> str:
    """Write bytes to storage and return their public URL."""
    return storage.public_url(storage.save(data, prefix=prefix, extension=".png"))


@pytest.fixture
def container(
    settings: Settings,
    storage: LocalImageStorage,
    session_store: SessionStore,
    generation_service: GenerationService,
    analysis_service: AnalysisService,
) -> AppContainer:
    upload_service = UploadService(
        storage=storage,
        session_store=session_store,
        max_upload_bytes=settings.max_upload_bytes,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
        storage=storage,
        session_store=session_store,
        upload_service=upload_service,
        generation_service=generation_service,
        analysis_service=analysis_service,
        close_resources=close_resources,
    )
