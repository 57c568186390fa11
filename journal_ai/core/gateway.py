from __future__ import annotations

import logging
from abc import ABC, abstractmethod

from .errors import ErrorKind, GenerationError, ProviderCallError
from .output_schemas import schema_for
from .prompts import PromptPair
from .types import (
    DEFAULT_MODEL_ID,
    DEFAULT_SAMPLING,
    Intent,
    ProviderRequest,
    ProviderResponse,
    SamplingParams,
)

logger = logging.getLogger(__name__)


class GenerationProvider(ABC):
    """A text generation backend reached with one request/response call.

    Implementations raise :class:`ProviderCallError` carrying the backend's
    status when the call fails.
    """

    name: str = "provider"

    @abstractmethod
    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        pass


def merge_sampling(
    overrides: SamplingParams | None,
    defaults: SamplingParams = DEFAULT_SAMPLING,
) -> SamplingParams:
    if overrides is None:
        return defaults
    return overrides.merged_over(defaults)


class ProviderGateway:
    def __init__(
        self,
        provider: GenerationProvider,
        default_model: str = DEFAULT_MODEL_ID,
        default_sampling: SamplingParams = DEFAULT_SAMPLING,
    ) -> None:
        self.provider = provider
        self.default_model = default_model
        self.default_sampling = default_sampling

    async def invoke(
        self,
        intent: Intent,
        prompt: PromptPair,
        overrides: SamplingParams | None = None,
        model: str | None = None,
    ) -> ProviderResponse:
        request = ProviderRequest(
            model=model or self.default_model,
            instructions=prompt.system_instruction,
            prompt=prompt.user_prompt,
            sampling=merge_sampling(overrides, self.default_sampling),
            output_schema=schema_for(intent),
        )

        try:
            return await self.provider.generate(request)
        except Exception as exc:
            error = classify_provider_error(exc)
            logger.warning(
                "%s call failed for %s (%s): %s",
                self.provider.name,
                intent.value,
                error.kind.value,
                exc,
            )
            raise error from exc


def classify_provider_error(exc: Exception) -> GenerationError:
    if isinstance(exc, GenerationError):
        return exc

    status = exc.status if isinstance(exc, ProviderCallError) else None

    if status == 429:
        return GenerationError(
            kind=ErrorKind.PROVIDER_RATE_LIMITED,
            message="AI service rate limit exceeded. Please try again later.",
            cause=exc,
        )

    if status == 400:
        return GenerationError(
            kind=ErrorKind.PROVIDER_BAD_REQUEST,
            message=f"Invalid request to AI service: {exc}",
            cause=exc,
        )

    if status in (401, 403):
        return GenerationError(
            kind=ErrorKind.PROVIDER_AUTH_FAILED,
            message="AI service authentication failed. Check API key configuration.",
            cause=exc,
        )

    return GenerationError(
        kind=ErrorKind.PROVIDER_UNAVAILABLE,
        message=f"AI service temporarily unavailable: {exc}",
        cause=exc,
    )
