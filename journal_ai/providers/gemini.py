from __future__ import annotations

import logging
from typing import Any

from google import genai
from google.genai import errors, types

from journal_ai.core.errors import ProviderCallError
from journal_ai.core.gateway import GenerationProvider
from journal_ai.core.types import ProviderRequest, ProviderResponse

logger = logging.getLogger(__name__)


class GeminiProvider(GenerationProvider):
    """Google Gemini through the ``google-genai`` SDK."""

    name = "gemini"

    def __init__(
        self,
        api_key: str | None,
        base_url: str | None = None,
        timeout: float = 60.0,
        client: genai.Client | None = None,
    ) -> None:
        self.api_key = api_key
        self.base_url = base_url
        self.timeout = timeout
        self._client = client

    def get_client(self) -> genai.Client:
        if self._client is None:
            if not self.api_key:
                raise ProviderCallError(401, "Gemini API key is not configured.")
            self._client = genai.Client(
                api_key=self.api_key,
                http_options=types.HttpOptions(
                    base_url=self.base_url,
                    timeout=int(self.timeout * 1000),
                ),
            )
        return self._client

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        client = self.get_client()

        try:
            response = await client.aio.models.generate_content(
                model=request.model,
                contents=request.prompt,
                config=build_config(request),
            )
        except errors.APIError as e:
            message = e.message or str(e)
            logger.warning("Gemini API error %s: %s", e.code, message[:500])
            raise ProviderCallError(e.code, message) from e

        return to_provider_response(response)


def build_config(request: ProviderRequest) -> types.GenerateContentConfig:
    sampling = request.sampling
    config: dict[str, Any] = {
        "temperature": sampling.temperature,
        "max_output_tokens": sampling.max_output_tokens,
        "top_p": sampling.top_p,
        "top_k": sampling.top_k,
    }

    if request.instructions:
        config["system_instruction"] = request.instructions
    if request.output_schema is not None:
        config["response_mime_type"] = "application/json"
        config["response_schema"] = request.output_schema

    return types.GenerateContentConfig(**config)


def to_provider_response(response: types.GenerateContentResponse) -> ProviderResponse:
    candidate = response.candidates[0] if response.candidates else None

    finish_reason = None
    safety_info = None
    if candidate is not None:
        if candidate.finish_reason is not None:
            finish_reason = getattr(candidate.finish_reason, "value", str(candidate.finish_reason))
        if candidate.safety_ratings:
            safety_info = [
                rating.model_dump(mode="json", exclude_none=True)
                for rating in candidate.safety_ratings
            ]

    usage = response.usage_metadata
    return ProviderResponse(
        text=response.text or "",
        finish_reason=finish_reason,
        usage_metadata=usage.model_dump(mode="json", exclude_none=True) if usage else None,
        safety_info=safety_info,
    )
