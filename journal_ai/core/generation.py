from __future__ import annotations

import logging
import re
from dataclasses import replace
from typing import TYPE_CHECKING, Any

from .errors import validation_error
from .gateway import ProviderGateway
from .interpreter import interpret
from .prompts import (
    build_affirmation_prompt,
    build_freeform_prompt,
    build_reflection_prompt,
    build_writing_prompts_prompt,
)
from .types import (
    DEFAULT_PROMPT_COUNT,
    INTENT_TEMPERATURES,
    MAX_PROMPT_COUNT,
    MIN_PROMPT_COUNT,
    AffirmationRequest,
    FreeformGeneration,
    GenerationResult,
    Intent,
    ReflectionPromptRequest,
    SamplingParams,
    WritingPromptsRequest,
)

if TYPE_CHECKING:
    from journal_ai.store import ContentStore

logger = logging.getLogger(__name__)

_LEADING_INTEGER = re.compile(r"\s*([+-]?\d+)")


class GenerationService:
    """Entry points for each generation intent.

    Every method validates its input before the provider is contacted, so an
    invalid request never spends provider quota.
    """

    def __init__(self, gateway: ProviderGateway) -> None:
        self.gateway = gateway

    async def generate_freeform(self, request: FreeformGeneration) -> GenerationResult:
        validate_prompt(request.prompt)
        validate_sampling(request.sampling)

        response = await self.gateway.invoke(
            Intent.FREEFORM,
            build_freeform_prompt(request),
            overrides=request.sampling,
            model=request.model,
        )
        return interpret(Intent.FREEFORM, response)

    async def generate_reflection_question(
        self,
        request: ReflectionPromptRequest,
    ) -> GenerationResult:
        if not request.entry_content:
            raise validation_error(
                "Entry content is required to generate a reflection prompt",
                entry="A valid entry with content is required",
            )

        response = await self.gateway.invoke(
            Intent.REFLECTION_QUESTION,
            build_reflection_prompt(request),
            overrides=_intent_sampling(Intent.REFLECTION_QUESTION),
        )
        return interpret(Intent.REFLECTION_QUESTION, response)

    async def generate_writing_prompts(
        self,
        request: WritingPromptsRequest,
    ) -> GenerationResult:
        request = replace(request, count=clamp_count(request.count))

        response = await self.gateway.invoke(
            Intent.WRITING_PROMPTS,
            build_writing_prompts_prompt(request),
            overrides=_intent_sampling(Intent.WRITING_PROMPTS),
        )
        return interpret(Intent.WRITING_PROMPTS, response, count=request.count)

    async def generate_affirmation(self, request: AffirmationRequest) -> GenerationResult:
        response = await self.gateway.invoke(
            Intent.AFFIRMATION,
            build_affirmation_prompt(request),
            overrides=_intent_sampling(Intent.AFFIRMATION),
        )
        return interpret(Intent.AFFIRMATION, response)

    async def reflection_question_for_entry(
        self,
        store: ContentStore,
        owner_id: str,
        entry_id: str | None,
    ) -> GenerationResult:
        if not entry_id:
            raise validation_error(
                "Entry ID is required",
                entryId="Please provide the entry ID",
            )

        entry = await store.get_entry(owner_id, entry_id)

        if not entry.delivered:
            raise validation_error(
                "Reflection prompts are only available for delivered entries",
                entryId="This entry has not been delivered yet",
            )

        logger.info("Generating reflection question for entry %s", entry_id)
        return await self.generate_reflection_question(entry.to_reflection_request())


def clamp_count(raw: Any) -> int:
    """Read the leading integer of ``raw`` ("2.5" and "4 prompts" count) and clamp it."""
    if isinstance(raw, (int, float)):
        try:
            count = int(raw)
        except (OverflowError, ValueError):
            return DEFAULT_PROMPT_COUNT
    else:
        match = _LEADING_INTEGER.match(raw) if isinstance(raw, str) else None
        if match is None:
            return DEFAULT_PROMPT_COUNT
        count = int(match.group(1))

    # 0 is treated like a missing value.
    if count == 0:
        return DEFAULT_PROMPT_COUNT
    return max(MIN_PROMPT_COUNT, min(MAX_PROMPT_COUNT, count))


def validate_prompt(prompt: Any) -> None:
    if not isinstance(prompt, str):
        raise validation_error(
            "Prompt is required and must be a string",
            prompt="A valid text prompt is required",
        )
    if not prompt.strip():
        raise validation_error(
            "Prompt cannot be empty",
            prompt="Prompt must contain text",
        )


def validate_sampling(sampling: SamplingParams | None) -> None:
    if sampling is None:
        return

    if sampling.temperature is not None and not 0 <= sampling.temperature <= 2:
        raise validation_error(
            "temperature must be between 0 and 2",
            temperature="Expected a value in [0, 2]",
        )
    if sampling.max_output_tokens is not None and sampling.max_output_tokens <= 0:
        raise validation_error(
            "maxOutputTokens must be positive",
            maxOutputTokens="Expected a value greater than 0",
        )
    if sampling.top_p is not None and not 0 <= sampling.top_p <= 1:
        raise validation_error(
            "topP must be between 0 and 1",
            topP="Expected a value in [0, 1]",
        )
    if sampling.top_k is not None and sampling.top_k < 0:
        raise validation_error(
            "topK must not be negative",
            topK="Expected a value of at least 0",
        )


def format_envelope(
    result: GenerationResult,
    extra: dict[str, Any] | None = None,
) -> dict[str, Any]:
    data = dict(result.payload)
    if extra:
        data.update(extra)
    data["metadata"] = result.metadata.to_dict()

    return {"success": True, "data": data}


def _intent_sampling(intent: Intent) -> SamplingParams:
    return SamplingParams(temperature=INTENT_TEMPERATURES[intent])
