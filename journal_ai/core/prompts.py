from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from .text import extract_themes, format_themes, sanitize, time_since
from .types import (
    AffirmationRequest,
    FreeformGeneration,
    Goal,
    ReflectionPromptRequest,
    UsageStats,
    WritingPromptsRequest,
)

REFLECTION_INSTRUCTIONS = """You create reflection questions for a journaling app. Users wrote entries to their future selves and are now reading them.

Rules:
- Create ONE question that helps them reflect on their growth
- Keep it 15-25 words
- Never use quotation marks
- Never quote the entry directly
- Paraphrase themes in your own words"""

WRITING_PROMPTS_INSTRUCTIONS = """You are a creative writing coach for a journaling app where users write entries to their future selves. Generate inspiring, thought-provoking writing prompts.

Guidelines:
- Create prompts that encourage self-reflection and personal growth
- Make prompts open-ended and inviting
- Vary the depth and tone of prompts
- Include prompts about hopes, dreams, current feelings, gratitude, lessons learned
- Keep each prompt to 1-2 sentences
- Do NOT number the prompts
- Generate exactly {count} prompts"""

AFFIRMATION_INSTRUCTIONS = """You are an uplifting, warm presence in a self-reflection journaling app. Generate a single positive affirmation to greet the user.

Guidelines:
- Be genuine and warm, not generic or cliche
- Keep it brief (1-2 sentences)
- Focus on self-worth, growth, capability, or the present moment
- If the user's name is provided, use it naturally (not forced)
- Match the tone to the time of day
- Never be preachy or condescending
- Avoid starting with "Remember that..." or similar phrases"""

TIME_OF_DAY_GREETINGS = {
    "morning": "It is morning, a fresh start to the day.",
    "afternoon": "It is afternoon.",
    "evening": "It is evening, winding down for the day.",
    "night": "It is night time.",
}

TITLE_MAX_LENGTH = 100
CONTEXT_MAX_LENGTH = 200


@dataclass(frozen=True, slots=True)
class PromptPair:
    system_instruction: str | None
    user_prompt: str


def build_freeform_prompt(request: FreeformGeneration) -> PromptPair:
    return PromptPair(
        system_instruction=request.system_instruction or None,
        user_prompt=request.prompt,
    )


def build_reflection_prompt(
    request: ReflectionPromptRequest,
    now: datetime | None = None,
) -> PromptPair:
    title = sanitize(request.entry_title or "Untitled", TITLE_MAX_LENGTH)
    mood = sanitize(request.mood, CONTEXT_MAX_LENGTH)
    themes = format_themes(extract_themes(request.entry_content))

    lines = [
        "Entry details:",
        f"- Written: {time_since(request.created_at, now)} ago",
        f"- Title: {title}",
        f"Mood: {mood}" if mood else "",
        format_goals(request.goals),
        f"- Key themes: {themes}",
    ]

    return PromptPair(
        REFLECTION_INSTRUCTIONS,
        _render(lines, "Create a reflection question about these themes."),
    )


def build_writing_prompts_prompt(request: WritingPromptsRequest) -> PromptPair:
    mood = sanitize(request.mood, CONTEXT_MAX_LENGTH)
    theme = sanitize(request.theme, CONTEXT_MAX_LENGTH)

    lines = [
        f"Generate {request.count} unique writing prompts for someone writing "
        "an entry to their future self.",
        f"The user's current mood is: {mood}" if mood else "",
        f"They're interested in writing about: {theme}" if theme else "",
    ]

    return PromptPair(
        WRITING_PROMPTS_INSTRUCTIONS.format(count=request.count),
        _render(
            lines,
            "The prompts should inspire meaningful self-expression and reflection.",
        ),
    )


def build_affirmation_prompt(request: AffirmationRequest) -> PromptPair:
    name = sanitize(request.display_name, TITLE_MAX_LENGTH)

    lines = [
        "Generate a positive affirmation for a user opening the app.",
        time_of_day_greeting(request.time_of_day),
        f"The user's name is {name}." if name else "",
        format_usage_stats(request.usage_stats),
    ]

    return PromptPair(
        AFFIRMATION_INSTRUCTIONS,
        _render(
            lines,
            "Create a warm, encouraging message that makes them feel valued and capable.",
        ),
    )


def format_goals(goals: list[Goal] | None) -> str:
    if not goals:
        return ""

    rendered = []
    for goal in goals:
        status = f" ({goal.status})" if goal.status != "pending" else ""
        rendered.append(f"- {sanitize(goal.text, CONTEXT_MAX_LENGTH)}{status}")

    return "Goals set in this entry:\n" + "\n".join(rendered)


def time_of_day_greeting(time_of_day: str | None) -> str:
    if not time_of_day:
        return ""
    return TIME_OF_DAY_GREETINGS.get(time_of_day.lower(), "")


def format_usage_stats(stats: UsageStats | None) -> str:
    if stats is None:
        return ""

    sentences: list[str] = []
    if stats.current_streak > 0:
        sentences.append(f"They have a {stats.current_streak}-day writing streak.")
    if stats.total_entries > 0:
        sentences.append(f"They have written {_count(stats.total_entries, 'entry', 'entries')}.")
    if stats.goals_accomplished > 0:
        sentences.append(
            f"They have accomplished {_count(stats.goals_accomplished, 'goal', 'goals')}."
        )

    return " ".join(sentences)


def _count(amount: int, singular: str, plural: str) -> str:
    return f"{amount} {singular if amount == 1 else plural}"


def _render(lines: list[str], closing: str) -> str:
    body = "\n".join(line for line in lines if line)
    return f"{body}\n\n{closing}"
