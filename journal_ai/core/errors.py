from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    PROVIDER_RATE_LIMITED = "provider_rate_limited"
    PROVIDER_BAD_REQUEST = "provider_bad_request"
    PROVIDER_AUTH_FAILED = "provider_auth_failed"
    PROVIDER_UNAVAILABLE = "provider_unavailable"


@dataclass
class GenerationError(Exception):
    """Typed failure surfaced to the HTTP boundary.

    Only ``kind``, ``message`` and ``details`` are meant for callers; ``cause``
    keeps the original provider exception around for logging.
    """

    kind: ErrorKind
    message: str
    details: Mapping[str, str] = field(default_factory=dict)
    cause: BaseException | None = None

    def __post_init__(self) -> None:
        self.details = MappingProxyType(dict(self.details))

    def __str__(self) -> str:
        return self.message

    def to_error(self) -> dict[str, Any]:
        error: dict[str, Any] = {
            "code": self.kind.value,
            "message": self.message,
        }
        if self.details:
            error["details"] = dict(self.details)
        return error


def validation_error(message: str, **details: str) -> GenerationError:
    return GenerationError(
        kind=ErrorKind.VALIDATION,
        message=message,
        details=details,
    )


@dataclass
class ProviderCallError(Exception):
    """Raised by providers; ``status`` is an HTTP-like status when one is known."""

    status: int | None
    message: str

    def __str__(self) -> str:
        return self.message
