from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from journal_ai.api.schemas import GenerateRequest, ReflectionPromptRequestBody
from journal_ai.core.generation import GenerationService, format_envelope
from journal_ai.core.types import AffirmationRequest, WritingPromptsRequest
from journal_ai.dependencies import (
    get_content_store,
    get_generation_service,
    get_owner_id,
)
from journal_ai.store import ContentStore

router = APIRouter(prefix="/ai", tags=["ai"])


@router.post("/generate")
async def generate(
    payload: GenerateRequest,
    service: GenerationService = Depends(get_generation_service),
) -> dict:
    result = await service.generate_freeform(payload.to_generation())
    return format_envelope(result)


@router.post("/reflection-prompt")
async def reflection_prompt(
    payload: ReflectionPromptRequestBody,
    owner_id: str = Depends(get_owner_id),
    service: GenerationService = Depends(get_generation_service),
    store: ContentStore = Depends(get_content_store),
) -> dict:
    result = await service.reflection_question_for_entry(store, owner_id, payload.entry_id)
    return format_envelope(result, extra={"entryId": payload.entry_id})


@router.get("/writing-prompts")
async def writing_prompts(
    mood: str | None = None,
    theme: str | None = None,
    count: str | None = None,
    service: GenerationService = Depends(get_generation_service),
) -> dict:
    # count stays a raw string; the service clamps it into range
    result = await service.generate_writing_prompts(
        WritingPromptsRequest(mood=mood, theme=theme, count=count)
    )
    return format_envelope(result)


@router.get("/affirmation")
async def affirmation(
    time_of_day: str | None = Query(default=None, alias="timeOfDay"),
    owner_id: str = Depends(get_owner_id),
    service: GenerationService = Depends(get_generation_service),
    store: ContentStore = Depends(get_content_store),
) -> dict:
    profile = await store.get_profile(owner_id)
    result = await service.generate_affirmation(
        AffirmationRequest(
            display_name=profile.display_name,
            time_of_day=time_of_day,
            usage_stats=profile.stats,
        )
    )
    return format_envelope(result)
