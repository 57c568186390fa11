from __future__ import annotations

import json

import pytest

from journal_ai.core.gateway import GenerationProvider, ProviderGateway
from journal_ai.core.generation import GenerationService
from journal_ai.core.types import ProviderRequest, ProviderResponse


class FakeProvider(GenerationProvider):
    name = "fake"

    def __init__(self, text: str = "", error: Exception | None = None):
        self.text = text
        self.error = error
        self.requests: list[ProviderRequest] = []

    @property
    def calls(self) -> int:
        return len(self.requests)

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return ProviderResponse(
            text=self.text,
            finish_reason="STOP",
            usage_metadata={"totalTokenCount": 12},
        )


@pytest.fixture()
def provider() -> FakeProvider:
    return FakeProvider(text=json.dumps({"question": "What has changed since you wrote this?"}))


@pytest.fixture()
def service(provider: FakeProvider) -> GenerationService:
    return GenerationService(ProviderGateway(provider))
