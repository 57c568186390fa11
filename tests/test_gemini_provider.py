from __future__ import annotations

import asyncio
from types import SimpleNamespace

import pytest
from google.genai import errors, types

from journal_ai.core.errors import ErrorKind, GenerationError, ProviderCallError
from journal_ai.core.gateway import ProviderGateway
from journal_ai.core.prompts import PromptPair
from journal_ai.core.types import DEFAULT_SAMPLING, Intent, ProviderRequest
from journal_ai.providers.gemini import GeminiProvider, build_config


def _reply() -> types.GenerateContentResponse:
    return types.GenerateContentResponse(
        candidates=[
            types.Candidate(
                content=types.Content(
                    role="model",
                    parts=[types.Part(text='{"question": "Why now?"}')],
                ),
                finish_reason=types.FinishReason.STOP,
                safety_ratings=[
                    types.SafetyRating(
                        category=types.HarmCategory.HARM_CATEGORY_HARASSMENT,
                        probability=types.HarmProbability.NEGLIGIBLE,
                    )
                ],
            )
        ],
        usage_metadata=types.GenerateContentResponseUsageMetadata(
            prompt_token_count=30,
            candidates_token_count=6,
        ),
    )


class FakeModels:
    def __init__(self, reply=None, error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.calls: list[dict] = []

    async def generate_content(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error
        return self.reply


def _provider(models: FakeModels) -> GeminiProvider:
    client = SimpleNamespace(aio=SimpleNamespace(models=models))
    return GeminiProvider(api_key="test-key", client=client)


def _request(**overrides) -> ProviderRequest:
    values = {
        "model": "gemini-test",
        "instructions": "Ask one question.",
        "prompt": "Entry details",
        "sampling": DEFAULT_SAMPLING,
        "output_schema": {
            "type": "object",
            "properties": {"question": {"type": "string"}},
            "required": ["question"],
        },
    }
    values.update(overrides)
    return ProviderRequest(**values)


def test_build_config_maps_sampling_and_schema():
    config = build_config(_request())

    assert config.temperature == 0.7
    assert config.max_output_tokens == 2048
    assert config.top_p == 0.95
    assert config.top_k == 40
    assert config.system_instruction == "Ask one question."
    assert config.response_mime_type == "application/json"
    assert config.response_schema is not None


def test_build_config_plain_text():
    config = build_config(_request(instructions=None, output_schema=None))

    assert config.system_instruction is None
    assert config.response_mime_type is None
    assert config.response_schema is None


def test_generate_parses_candidate():
    models = FakeModels(reply=_reply())

    response = asyncio.run(_provider(models).generate(_request()))

    call = models.calls[0]
    assert call["model"] == "gemini-test"
    assert call["contents"] == "Entry details"
    assert call["config"].top_k == 40
    assert response.text == '{"question": "Why now?"}'
    assert response.finish_reason == "STOP"
    assert response.usage_metadata["prompt_token_count"] == 30
    assert response.usage_metadata["candidates_token_count"] == 6
    assert response.safety_info[0]["probability"] == "NEGLIGIBLE"


def test_generate_without_candidates_returns_empty_text():
    models = FakeModels(reply=types.GenerateContentResponse())

    response = asyncio.run(_provider(models).generate(_request()))

    assert response.text == ""
    assert response.finish_reason is None
    assert response.usage_metadata is None


@pytest.mark.parametrize(
    ("status", "error", "kind"),
    [
        (429, errors.ClientError, ErrorKind.PROVIDER_RATE_LIMITED),
        (400, errors.ClientError, ErrorKind.PROVIDER_BAD_REQUEST),
        (403, errors.ClientError, ErrorKind.PROVIDER_AUTH_FAILED),
        (503, errors.ServerError, ErrorKind.PROVIDER_UNAVAILABLE),
    ],
)
def test_api_errors_are_classified_by_gateway(status, error, kind):
    api_error = error(status, {"error": {"code": status, "message": "nope", "status": "X"}})
    gateway = ProviderGateway(_provider(FakeModels(error=api_error)))

    with pytest.raises(GenerationError) as exc_info:
        asyncio.run(gateway.invoke(Intent.AFFIRMATION, PromptPair(None, "hello")))

    assert exc_info.value.kind is kind
    assert isinstance(exc_info.value.cause, ProviderCallError)
    assert exc_info.value.cause.status == status
    assert exc_info.value.cause.message == "nope"


def test_missing_api_key_is_auth_failure():
    provider = GeminiProvider(api_key=None)

    with pytest.raises(ProviderCallError) as exc_info:
        asyncio.run(provider.generate(_request()))

    assert exc_info.value.status == 401
