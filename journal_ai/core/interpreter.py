from __future__ import annotations

import json
import logging
import re
from typing import Any

from .output_schemas import payload_field
from .types import GenerationMetadata, GenerationResult, Intent, ProviderResponse

logger = logging.getLogger(__name__)

DEFAULT_QUESTION = "How do you feel reading this entry now?"
MIN_PROMPT_LINE_LENGTH = 6
LOG_PREVIEW_LENGTH = 200

_FIRST_QUESTION = re.compile(r"[^.!?]*\?")
_LEADING_NON_LETTERS = re.compile(r"^[^a-zA-Z]*")
_QUOTES = re.compile(r"[\"']")


class PayloadShapeError(ValueError):
    """Decoded JSON does not match the intent's output contract."""


def interpret(
    intent: Intent,
    response: ProviderResponse,
    count: int | None = None,
) -> GenerationResult:
    if intent is Intent.FREEFORM:
        return GenerationResult(
            intent=intent,
            payload={"text": response.text or ""},
            metadata=_metadata(response, degraded=False),
        )

    try:
        payload = decode_payload(intent, response.text, count)
    except ValueError as exc:
        logger.warning(
            "Falling back to heuristic parsing for %s: %s (raw=%r)",
            intent.value,
            exc,
            (response.text or "")[:LOG_PREVIEW_LENGTH],
        )
        return GenerationResult(
            intent=intent,
            payload=_fallback_payload(intent, response.text, count),
            metadata=_metadata(response, degraded=True),
        )

    logger.debug("Parsed structured %s response", intent.value)
    return GenerationResult(
        intent=intent,
        payload=payload,
        metadata=_metadata(response, degraded=False),
    )


def decode_payload(
    intent: Intent,
    raw_text: str | None,
    count: int | None = None,
) -> dict[str, Any]:
    try:
        data = json.loads(strip_code_fence(raw_text or ""))
    except RecursionError as exc:
        raise PayloadShapeError("reply is nested too deeply to decode") from exc
    field_name = payload_field(intent)

    if not isinstance(data, dict) or field_name not in data:
        raise PayloadShapeError(f"missing '{field_name}' field")

    value = data[field_name]

    if intent is Intent.WRITING_PROMPTS:
        if not isinstance(value, list) or not all(isinstance(p, str) for p in value):
            raise PayloadShapeError("'prompts' must be an array of strings")
        if count is not None:
            value = value[:count]
    elif not isinstance(value, str):
        raise PayloadShapeError(f"'{field_name}' must be a string")

    return {field_name: value}


def strip_code_fence(raw: str) -> str:
    """Return the JSON body of a markdown-fenced reply, or the text unchanged."""
    text = raw.strip()
    if "```" not in text:
        return text

    for part in text.split("```"):
        part = part.strip()
        if part.lower().startswith("json"):
            part = part[4:].strip()
        if part.startswith("{"):
            return part
    return text


def fallback_question(raw_text: str | None) -> str:
    if not raw_text:
        return DEFAULT_QUESTION

    match = _FIRST_QUESTION.search(raw_text)
    if match is None:
        return DEFAULT_QUESTION

    question = _LEADING_NON_LETTERS.sub("", match.group(0))
    return _QUOTES.sub("", question).strip()


def fallback_prompts(raw_text: str | None, count: int | None) -> list[str]:
    lines = [line.strip() for line in (raw_text or "").split("\n")]
    prompts = [line for line in lines if len(line) >= MIN_PROMPT_LINE_LENGTH]
    if count is None:
        return prompts
    return prompts[:count]


def fallback_affirmation(raw_text: str | None) -> str:
    return (raw_text or "").strip()


def _fallback_payload(
    intent: Intent,
    raw_text: str | None,
    count: int | None,
) -> dict[str, Any]:
    if intent is Intent.REFLECTION_QUESTION:
        return {"question": fallback_question(raw_text)}
    if intent is Intent.WRITING_PROMPTS:
        return {"prompts": fallback_prompts(raw_text, count)}
    return {"affirmation": fallback_affirmation(raw_text)}


def _metadata(response: ProviderResponse, degraded: bool) -> GenerationMetadata:
    return GenerationMetadata(
        finish_reason=response.finish_reason,
        usage_metadata=response.usage_metadata,
        safety_info=response.safety_info,
        degraded=degraded,
    )
