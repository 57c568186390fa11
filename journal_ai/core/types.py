from __future__ import annotations

from dataclasses import dataclass, field, fields, replace
from datetime import datetime
from enum import Enum
from typing import Any

DEFAULT_MODEL_ID = "gemini-3-flash-preview"
DEFAULT_PROMPT_COUNT = 3
MIN_PROMPT_COUNT = 1
MAX_PROMPT_COUNT = 5


class Intent(str, Enum):
    FREEFORM = "freeform"
    REFLECTION_QUESTION = "reflection_question"
    WRITING_PROMPTS = "writing_prompts"
    AFFIRMATION = "affirmation"


@dataclass(frozen=True, slots=True)
class SamplingParams:
    temperature: float | None = None
    max_output_tokens: int | None = None
    top_p: float | None = None
    top_k: int | None = None

    def merged_over(self, defaults: SamplingParams) -> SamplingParams:
        """Return ``defaults`` with every non-null field of ``self`` applied."""
        overrides = {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }
        return replace(defaults, **overrides)

    def to_dict(self) -> dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


DEFAULT_SAMPLING = SamplingParams(
    temperature=0.7,
    max_output_tokens=2048,
    top_p=0.95,
    top_k=40,
)

INTENT_TEMPERATURES: dict[Intent, float] = {
    Intent.REFLECTION_QUESTION: 0.7,
    Intent.WRITING_PROMPTS: 0.9,
    Intent.AFFIRMATION: 0.85,
}


@dataclass(frozen=True, slots=True)
class Goal:
    text: str
    status: str = "pending"


@dataclass(frozen=True, slots=True)
class UsageStats:
    current_streak: int = 0
    total_entries: int = 0
    goals_accomplished: int = 0


@dataclass(slots=True)
class FreeformGeneration:
    prompt: Any
    system_instruction: str | None = None
    model: str | None = None
    sampling: SamplingParams | None = None


@dataclass(slots=True)
class ReflectionPromptRequest:
    entry_content: str
    entry_title: str | None = None
    mood: str | None = None
    goals: list[Goal] = field(default_factory=list)
    created_at: datetime | None = None


@dataclass(slots=True)
class WritingPromptsRequest:
    mood: str | None = None
    theme: str | None = None
    count: int = DEFAULT_PROMPT_COUNT


@dataclass(slots=True)
class AffirmationRequest:
    display_name: str | None = None
    time_of_day: str | None = None
    usage_stats: UsageStats | None = None


@dataclass(slots=True)
class ProviderRequest:
    model: str
    instructions: str | None
    prompt: str
    sampling: SamplingParams
    output_schema: dict[str, Any] | None = None


@dataclass(slots=True)
class ProviderResponse:
    text: str
    finish_reason: str | None = None
    usage_metadata: dict[str, Any] | None = None
    safety_info: list[dict[str, Any]] | None = None


@dataclass(slots=True)
class GenerationMetadata:
    finish_reason: str | None = None
    usage_metadata: dict[str, Any] | None = None
    safety_info: list[dict[str, Any]] | None = None
    degraded: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "finishReason": self.finish_reason,
            "usageMetadata": self.usage_metadata,
            "safetyInfo": self.safety_info,
            "degraded": self.degraded,
        }


@dataclass(slots=True)
class GenerationResult:
    intent: Intent
    payload: dict[str, Any]
    metadata: GenerationMetadata = field(default_factory=GenerationMetadata)
