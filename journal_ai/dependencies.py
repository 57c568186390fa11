from __future__ import annotations

import logging

from fastapi import FastAPI, Header, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from journal_ai.config import Settings
from journal_ai.core.errors import ErrorKind, GenerationError
from journal_ai.core.gateway import GenerationProvider, ProviderGateway
from journal_ai.core.generation import GenerationService
from journal_ai.providers.apple_fm import AppleFoundationModelProvider
from journal_ai.providers.gemini import GeminiProvider
from journal_ai.store import ContentStore, EntryNotFoundError

logger = logging.getLogger(__name__)

ERROR_STATUS_CODES = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.PROVIDER_RATE_LIMITED: 429,
    ErrorKind.PROVIDER_BAD_REQUEST: 502,
    ErrorKind.PROVIDER_AUTH_FAILED: 502,
    ErrorKind.PROVIDER_UNAVAILABLE: 503,
}

ANONYMOUS_USER_ID = "anonymous"


def build_provider(settings: Settings) -> GenerationProvider:
    if settings.provider == "apple_fm":
        return AppleFoundationModelProvider()

    if not settings.gemini_api_key:
        logger.error("JOURNAL_AI_GEMINI_API_KEY is not set; generation calls will fail")

    return GeminiProvider(
        api_key=settings.gemini_api_key,
        base_url=settings.gemini_base_url,
        timeout=settings.request_timeout_seconds,
    )


def get_generation_service(request: Request) -> GenerationService:
    return request.app.state.generation_service


def get_content_store(request: Request) -> ContentStore:
    return request.app.state.content_store


def get_owner_id(x_user_id: str | None = Header(default=None)) -> str:
    # Authentication lives in front of this service; it forwards the caller id.
    return x_user_id or ANONYMOUS_USER_ID


def build_generation_service(
    provider: GenerationProvider,
    settings: Settings,
) -> GenerationService:
    gateway = ProviderGateway(provider, default_model=settings.default_model)
    return GenerationService(gateway)


def error_body(code: str, message: str, details: dict | None = None) -> dict:
    error: dict = {"code": code, "message": message}
    if details:
        error["details"] = details
    return {"success": False, "error": error}


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(GenerationError)
    async def handle_generation_error(
        _request: Request,
        exc: GenerationError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=ERROR_STATUS_CODES.get(exc.kind, 500),
            content={"success": False, "error": exc.to_error()},
        )

    @app.exception_handler(EntryNotFoundError)
    async def handle_entry_not_found(
        _request: Request,
        exc: EntryNotFoundError,
    ) -> JSONResponse:
        return JSONResponse(
            status_code=404,
            content=error_body("not_found", str(exc), {"entryId": exc.entry_id}),
        )

    @app.exception_handler(RequestValidationError)
    async def handle_validation_error(
        _request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        errors = exc.errors()
        first_error = errors[0]["msg"] if errors else "Invalid request"
        details = {
            str(error["loc"][-1]): error["msg"]
            for error in errors
            if error.get("loc")
        }
        return JSONResponse(
            status_code=400,
            content=error_body(ErrorKind.VALIDATION.value, first_error, details),
        )
