"""FastAPI application factory."""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from plant_tracker.api.plants import router as plants_router
from plant_tracker.api.schemas import ImageRequest
from plant_tracker.app_logging import configure_logging
from plant_tracker.containers import AppContainer
from plant_tracker.domain.errors import ConfigurationError
from plant_tracker.domain.identification import (
    EncodedImage,
    IdentificationOutcome,
    LowConfidence,
    NotAPlant,
    Success,
    TransientError,
)
from plant_tracker.services.images import from_base64

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}
_MISSING_IMAGE = "Image data is required"
_MISSING_API_KEY = "API key not configured"
_IDENTIFY_FAILED = "Failed to identify plant"
_BAD_GATEWAY_FLOOR = 400


def create_app(container: AppContainer) -> FastAPI:
    """Create a FastAPI app configured with dependencies."""
    configure_logging(container.settings.log_level)
    logger = logging.getLogger(__name__)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        yield
        await app.state.container.close_resources()

    app = FastAPI(lifespan=lifespan)
    app.state.container = container
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["authorization", "x-client-info", "apikey", "content-type"],
    )
    app.include_router(plants_router)

    @app.exception_handler(RequestValidationError)
    async def invalid_request(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.info("Rejected invalid request to %s", request.url.path)
        return _json({"error": "Invalid request body"}, status.HTTP_400_BAD_REQUEST)

    @app.get("/health")
    async def health() -> dict[str, str]:
        """Simple health check endpoint."""
        return {"status": "ok"}

    @app.options("/verify-plant")
    @app.options("/identify-plant")
    async def preflight() -> Response:
        """Answer CORS preflight requests."""
        return Response(headers=CORS_HEADERS)

    @app.post("/verify-plant")
    async def verify_plant(body: ImageRequest, request: Request) -> JSONResponse:
        """Check whether the image contains a plant."""
        state_container: AppContainer = request.app.state.container
        image = _decode_image(body)
        if isinstance(image, JSONResponse):
            return image
        try:
            outcome = await state_container.identification_service.verify(image)
        except ConfigurationError:
            logger.exception("Plant verification is not configured")
            return _json({"error": _MISSING_API_KEY}, 500)
        return _json(outcome.model_dump(by_alias=True))

    @app.post("/identify-plant")
    async def identify_plant(body: ImageRequest, request: Request) -> JSONResponse:
        """Verify and identify the plant in the image."""
        state_container: AppContainer = request.app.state.container
        image = _decode_image(body)
        if isinstance(image, JSONResponse):
            return image
        try:
            outcome = await state_container.identification_service.identify_encoded(
                image
            )
        except ConfigurationError:
            logger.exception("Plant identification is not configured")
            return _json({"error": _MISSING_API_KEY}, 500)
        except Exception as exc:
            logger.exception("Plant identification failed")
            return _json(
                {"error": _format_error(state_container, exc, _IDENTIFY_FAILED)}, 500
            )
        return _outcome_response(state_container, outcome)

    return app


def _decode_image(body: ImageRequest) -> EncodedImage | JSONResponse:
    """Return the encoded image or a 400 response describing the problem."""
    if not body.image_base64 or not body.image_base64.strip():
        return _json({"error": _MISSING_IMAGE}, status.HTTP_400_BAD_REQUEST)
    try:
        return from_base64(body.image_base64)
    except ValueError as exc:
        return _json({"error": str(exc)}, status.HTTP_400_BAD_REQUEST)


def _outcome_response(
    state_container: AppContainer, outcome: IdentificationOutcome
) -> JSONResponse:
    """Map a pipeline outcome onto the identify endpoint's response shapes."""
    if isinstance(outcome, Success):
        return _json(outcome.result.model_dump(by_alias=True))
    if isinstance(outcome, NotAPlant):
        return _json(
            {"isPlant": False, "notAPlant": True, "confidence": outcome.confidence}
        )
    if isinstance(outcome, LowConfidence):
        content: dict[str, object] = {"lowConfidence": True}
        if outcome.probability is not None:
            content["probability"] = outcome.probability
        return _json(content)
    if isinstance(outcome, TransientError):
        status_code = outcome.status_code
        if status_code is None or status_code < _BAD_GATEWAY_FLOOR:
            status_code = status.HTTP_502_BAD_GATEWAY
        message = _IDENTIFY_FAILED
        if state_container.settings.environment == "local":
            message = f"{message} (debug: {outcome.message})"
        return _json({"error": message, "apiError": True}, status_code)
    raise TypeError(f"Unexpected identification outcome: {outcome!r}")


def _format_error(state_container: AppContainer, exc: Exception, fallback: str) -> str:
    """Return a user-facing error message with local debug info."""
    if state_container.settings.environment == "local":
        detail = f"{type(exc).__name__}: {exc}".strip()
        if detail:
            return f"{fallback} (debug: {detail})"
    return fallback


def _json(content: dict[str, object], status_code: int = 200) -> JSONResponse:
    return JSONResponse(content=content, status_code=status_code, headers=CORS_HEADERS)
