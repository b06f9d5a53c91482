"""FastAPI application factory."""

import json
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, Form, Request, UploadFile, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import ValidationError

from hairstyle_studio.api.schemas import (
    FeasibilityRequest,
    GenerateStyleRequest,
    StyleChangesRequest,
)
from hairstyle_studio.app_logging import configure_logging
from hairstyle_studio.config import parse_allowed_origins
from hairstyle_studio.containers import AppContainer
from hairstyle_studio.domain.hair import HairCondition
from hairstyle_studio.errors import InvalidRequestError, StorageError
from hairstyle_studio.services.uploads import UploadedFile


def create_app(container: AppContainer) -> FastAPI:  # noqa: PLR0915
    """Create a FastAPI app configured with dependencies."""
    configure_logging()
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=parse_allowed_origins(container.settings.cors_allow_origins),
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.mount(
        "/uploads",
        StaticFiles(directory=container.settings.uploads_dir),
        name="uploads",
    )

    @app.exception_handler(InvalidRequestError)
    async def invalid_request(
        request: Request, exc: InvalidRequestError
    ) -> JSONResponse:
        logger.info("Rejected request", extra={"path": request.url.path})
        return _error(status.HTTP_400_BAD_REQUEST, str(exc))

    @app.exception_handler(RequestValidationError)
    async def invalid_body(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Invalid request body")

    @app.exception_handler(StorageError)
    async def storage_failure(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure", extra={"path": request.url.path})
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _format_server_error(container, exc, "Failed to store image"),
        )

    @app.exception_handler(Exception)
    async def unexpected_failure(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("Unhandled error", extra={"path": request.url.path})
        return _error(
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            _format_server_error(container, exc, "Internal server error"),
        )

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.post("/api/upload/customer")
    async def upload_customer(  # noqa: PLR0913
        request: Request,
        session_id: str | None = Form(default=None, alias="sessionId"),
        user_info: str | None = Form(default=None, alias="userInfo"),
        hair_condition: str | None = Form(default=None, alias="hairCondition"),
        front: UploadFile | None = File(default=None),
        side: UploadFile | None = File(default=None),
        back: UploadFile | None = File(default=None),
    ) -> dict[str, object]:
        """Store customer photos, profile and hair condition."""
        state_container: AppContainer = request.app.state.container
        max_bytes = state_container.settings.max_upload_bytes
        photos = {
            name: await _read_upload(upload, max_bytes)
            for name, upload in (("front", front), ("side", side), ("back", back))
            if upload is not None
        }
        photo_urls = await state_container.upload_service.upload_customer(
            session_id,
            photos,
            _parse_user_info(user_info),
            _parse_hair_condition(hair_condition),
        )
        return {
            "success": True,
            "sessionId": session_id,
            "photoUrls": photo_urls,
            "message": "Upload successful",
        }

    @app.post("/api/upload/style")
    async def upload_style(
        request: Request,
        session_id: str | None = Form(default=None, alias="sessionId"),
        photo1: UploadFile | None = File(default=None),
        photo2: UploadFile | None = File(default=None),
        photo3: UploadFile | None = File(default=None),
    ) -> dict[str, object]:
        """Store reference style photos."""
        state_container: AppContainer = request.app.state.container
        max_bytes = state_container.settings.max_upload_bytes
        photos = {
            name: await _read_upload(upload, max_bytes)
            for name, upload in (
                ("photo1", photo1),
                ("photo2", photo2),
                ("photo3", photo3),
            )
            if upload is not None
        }
        photo_urls = await state_container.upload_service.upload_style(
            session_id, photos
        )
        return {
            "success": True,
            "sessionId": session_id,
            "stylePhotoUrls": photo_urls,
            "message": "Upload successful",
        }

    @app.post("/api/generate/style")
    async def generate_style(
        body: GenerateStyleRequest, request: Request
    ) -> dict[str, object]:
        """Apply the selected reference hairstyle to the customer photo."""
        state_container: AppContainer = request.app.state.container
        output = await state_container.generation_service.generate_style(
            session_id=body.session_id,
            customer_photo_ref=_front_photo(body.customer_photo_urls),
            style_photo_ref=body.style_photo_url,
            hair_condition=body.hair_condition,
        )
        return {
            "success": True,
            "sessionId": body.session_id,
            "generatedImageUrl": output.result.image_url,
            "styleName": output.style_name,
            "technicalSpecs": output.technical_specs.model_dump(by_alias=True),
            "outcome": output.result.outcome.value,
            "message": "Style image generated successfully",
        }

    @app.post("/api/analyze/style-changes")
    async def analyze_style_changes(
        body: StyleChangesRequest, request: Request
    ) -> dict[str, object]:
        """Compare the customer's current and target hairstyles."""
        state_container: AppContainer = request.app.state.container
        report = await state_container.analysis_service.analyze_style_changes(
            session_id=body.session_id,
            current_photo_ref=body.customer_photo_url,
            target_photo_ref=body.selected_style_image_url,
            hair_condition=body.hair_condition,
        )
        payload = report.analysis.model_dump(by_alias=True)
        return {
            "success": True,
            "sessionId": body.session_id,
            "styleChanges": payload["styleChanges"],
            "requiredProcedures": payload["requiredProcedures"],
            "outcome": report.outcome.value,
            "message": "Style changes analysis complete",
        }

    @app.post("/api/analyze/feasibility")
    async def analyze_feasibility(
        body: FeasibilityRequest, request: Request
    ) -> dict[str, object]:
        """Estimate how achievable the selected style is."""
        state_container: AppContainer = request.app.state.container
        report = await state_container.analysis_service.analyze_feasibility(
            session_id=body.session_id,
            customer_photo_ref=_front_photo(body.customer_photo_urls),
            target_photo_ref=body.selected_style_image_url,
            hair_condition=body.hair_condition,
        )
        return {
            "success": True,
            "sessionId": body.session_id,
            "feasibility": report.feasibility.model_dump(by_alias=True),
            "technicalSpecs": report.technical_specs.model_dump(by_alias=True),
            "outcome": report.outcome.value,
            "message": "Analysis complete",
        }

    return app


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code, content={"success": False, "message": message}
    )


def _format_server_error(
    container: AppContainer, exc: Exception, fallback: str
) -> str:
    """Return a client-facing error message with local debug info."""
    if container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _front_photo(photo_urls: dict[str, str | None] | None) -> str | None:
    if not photo_urls:
        return None
    return photo_urls.get("front")


async def _read_upload(upload: UploadFile, max_bytes: int) -> UploadedFile:
    """Read an upload, stopping one byte past the size limit."""
    data = await upload.read(max_bytes + 1)
    if len(data) > max_bytes:
        raise InvalidRequestError(f"File too large: {upload.filename}")
    return UploadedFile(filename=upload.filename, data=data)


def _parse_user_info(raw: str | None) -> dict[str, object] | None:
    if raw is None or not raw.strip():
        return None
    try:
        parsed = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidRequestError("userInfo must be a JSON object") from exc
    if not isinstance(parsed, dict):
        raise InvalidRequestError("userInfo must be a JSON object")
    return parsed


def _parse_hair_condition(raw: str | None) -> HairCondition | None:
    if raw is None or not raw.strip():
        return None
    try:
        return HairCondition.model_validate_json(raw)
    except ValidationError as exc:
        raise InvalidRequestError("hairCondition must be a JSON object") from exc
