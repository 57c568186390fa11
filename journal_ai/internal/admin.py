from __future__ import annotations

from fastapi import APIRouter, Depends

from journal_ai.core.generation import GenerationService
from journal_ai.dependencies import get_generation_service

router = APIRouter(prefix="/internal", tags=["internal"])


@router.get("/healthz")
async def healthz(
    service: GenerationService = Depends(get_generation_service),
) -> dict[str, str]:
    gateway = service.gateway
    return {
        "status": "ok",
        "provider": gateway.provider.name,
        "model": gateway.default_model,
    }
