from __future__ import annotations

import copy
from types import MappingProxyType
from typing import Any, Mapping

from .types import Intent

OUTPUT_SCHEMAS: Mapping[Intent, dict[str, Any]] = MappingProxyType(
    {
        Intent.REFLECTION_QUESTION: {
            "type": "object",
            "properties": {
                "question": {
                    "type": "string",
                    "description": (
                        "A single reflection question, 15-25 words, "
                        "ending with a question mark"
                    ),
                },
            },
            "required": ["question"],
        },
        Intent.WRITING_PROMPTS: {
            "type": "object",
            "properties": {
                "prompts": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Array of writing prompts, 1-2 sentences each",
                },
            },
            "required": ["prompts"],
        },
        Intent.AFFIRMATION: {
            "type": "object",
            "properties": {
                "affirmation": {
                    "type": "string",
                    "description": (
                        "A positive affirmation, 1-2 sentences, warm and genuine"
                    ),
                },
            },
            "required": ["affirmation"],
        },
    }
)


def schema_for(intent: Intent) -> dict[str, Any] | None:
    """Return a private copy of the output contract, or None for free text."""
    schema = OUTPUT_SCHEMAS.get(intent)
    if schema is None:
        return None
    return copy.deepcopy(schema)


def payload_field(intent: Intent) -> str:
    schema = OUTPUT_SCHEMAS[intent]
    return schema["required"][0]
