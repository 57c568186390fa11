from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from journal_ai.core.types import FreeformGeneration, SamplingParams


class GenerateRequest(BaseModel):
    # Left untyped so blank or non-string prompts reach the service's own
    # validation and come back with field-level details.
    prompt: Any = None
    system_instruction: str | None = Field(default=None, alias="systemInstruction")
    model: str | None = None
    temperature: float | None = None
    max_output_tokens: int | None = Field(default=None, alias="maxOutputTokens")
    top_p: float | None = Field(default=None, alias="topP")
    top_k: int | None = Field(default=None, alias="topK")

    model_config = ConfigDict(extra="allow", populate_by_name=True)

    def to_generation(self) -> FreeformGeneration:
        return FreeformGeneration(
            prompt=self.prompt,
            system_instruction=self.system_instruction,
            model=self.model,
            sampling=SamplingParams(
                temperature=self.temperature,
                max_output_tokens=self.max_output_tokens,
                top_p=self.top_p,
                top_k=self.top_k,
            ),
        )


class ReflectionPromptRequestBody(BaseModel):
    entry_id: str | None = Field(default=None, alias="entryId")

    model_config = ConfigDict(extra="allow", populate_by_name=True)
