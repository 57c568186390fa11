"""Input clean-up helpers used before anything is interpolated into a prompt.

Entry text is never forwarded verbatim: :func:`extract_themes` reduces it to a
handful of topical labels so a provider cannot quote it back.
"""

from __future__ import annotations

import re
from datetime import datetime, timezone

DEFAULT_SANITIZE_LENGTH = 2000
MAX_THEMES = 3

NO_CONTENT_THEME = "personal reflection"
GENERIC_THEME = "self-reflection and personal thoughts"

# Ordered by priority; only the first MAX_THEMES matches are kept.
THEME_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("goals and aspirations", ("goal", "achieve", "accomplish")),
    ("career", ("work", "career", "job")),
    ("relationships", ("family", "relationship", "friend")),
    ("health and wellness", ("health", "exercise", "fitness")),
    ("happiness", ("happy", "joy", "excited")),
    ("managing stress", ("stress", "anxious", "worried")),
    ("personal growth", ("learn", "grow", "improve")),
    ("focus and productivity", ("focus", "productive", "discipline")),
    ("gratitude", ("grateful", "thankful", "appreciate")),
    ("love life", ("love", "partner", "dating")),
)

_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def sanitize(text: str | None, max_length: int = DEFAULT_SANITIZE_LENGTH) -> str:
    if not text:
        return ""

    cleaned = str(text)[:max_length]
    cleaned = cleaned.replace('"', "'").replace("\\", "")
    cleaned = _EXCESS_NEWLINES.sub("\n\n", cleaned)
    return cleaned.strip()


def extract_themes(content: str | None) -> list[str]:
    if not content:
        return [NO_CONTENT_THEME]

    lowered = content.lower()
    themes = [
        label
        for label, keywords in THEME_KEYWORDS
        if any(keyword in lowered for keyword in keywords)
    ]

    return themes[:MAX_THEMES] or [GENERIC_THEME]


def format_themes(themes: list[str]) -> str:
    return ", ".join(themes)


def time_since(created_at: datetime | None, now: datetime | None = None) -> str:
    if created_at is None:
        return "some time"

    now = now or datetime.now(timezone.utc)
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=timezone.utc)
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)

    days = max(0, (now - created_at).days)

    if days < 7:
        return _plural(days, "day")
    if days < 30:
        return _plural(days // 7, "week")
    if days < 365:
        return _plural(days // 30, "month")
    return _plural(days // 365, "year")


def _plural(amount: int, unit: str) -> str:
    suffix = "" if amount == 1 else "s"
    return f"{amount} {unit}{suffix}"
