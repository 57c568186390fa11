from __future__ import annotations

import importlib
import importlib.util
import logging
import math
from typing import TYPE_CHECKING, Any

from journal_ai.core.errors import ProviderCallError
from journal_ai.core.gateway import GenerationProvider
from journal_ai.core.types import ProviderRequest, ProviderResponse

if TYPE_CHECKING:
    import apple_fm_sdk as fm_types

logger = logging.getLogger(__name__)

fm: Any = None
if importlib.util.find_spec("apple_fm_sdk") is not None:
    fm = importlib.import_module("apple_fm_sdk")
HAS_APPLE_FM_SDK = fm is not None


class AppleFoundationModelProvider(GenerationProvider):
    """On-device Apple Foundation Models session.

    The SDK exposes no sampling controls, so only instructions, the prompt and
    the output schema are forwarded. Token usage is estimated.
    """

    name = "apple_fm"

    async def generate(self, request: ProviderRequest) -> ProviderResponse:
        session = _create_session(request)

        try:
            if request.output_schema is None:
                text = str(await session.respond(request.prompt))
            else:
                generated = await session.respond(
                    request.prompt,
                    json_schema=request.output_schema,
                )
                text = generated.to_json()
        except ProviderCallError:
            raise
        except Exception as exc:
            raise ProviderCallError(sdk_error_status(exc), str(exc)) from exc

        return ProviderResponse(
            text=text,
            finish_reason="stop",
            usage_metadata={
                "promptTokenCount": estimate_tokens(request.prompt),
                "candidatesTokenCount": estimate_tokens(text),
            },
        )


def sdk_error_status(exc: Exception) -> int | None:
    """Translate Foundation Models exceptions to HTTP-like statuses."""

    if not HAS_APPLE_FM_SDK:
        return None

    if isinstance(exc, (fm.RateLimitedError, fm.ConcurrentRequestsError)):
        return 429

    if isinstance(
        exc,
        (
            fm.ExceededContextWindowSizeError,
            fm.InvalidGenerationSchemaError,
            fm.UnsupportedGuideError,
            fm.UnsupportedLanguageOrLocaleError,
            fm.GuardrailViolationError,
            fm.RefusalError,
        ),
    ):
        return 400

    if isinstance(exc, fm.AssetsUnavailableError):
        return 503

    return 500


def estimate_tokens(text: str) -> int:
    if not text:
        return 0

    return max(1, math.ceil(len(text) / 4))


def _create_session(request: ProviderRequest) -> "fm_types.LanguageModelSession":
    if not HAS_APPLE_FM_SDK:
        raise ProviderCallError(
            503,
            "Foundation model SDK is not installed in this environment.",
        )

    model = fm.SystemLanguageModel()
    is_available, reason = model.is_available()

    if not is_available:
        reason_name = getattr(reason, "name", str(reason) if reason else "UNKNOWN")
        raise ProviderCallError(
            503,
            f"Foundation model is unavailable on this machine (reason={reason_name}).",
        )

    logger.debug("Ignoring sampling overrides for on-device model: %s", request.sampling)

    if request.instructions:
        return fm.LanguageModelSession(instructions=request.instructions, model=model)

    return fm.LanguageModelSession(model=model)
