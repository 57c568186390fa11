from __future__ import annotations

from datetime import datetime, timedelta, timezone

from journal_ai.core.prompts import (
    build_affirmation_prompt,
    build_reflection_prompt,
    build_writing_prompts_prompt,
    format_goals,
    format_usage_stats,
    time_of_day_greeting,
)
from journal_ai.core.types import (
    AffirmationRequest,
    Goal,
    ReflectionPromptRequest,
    UsageStats,
    WritingPromptsRequest,
)

NOW = datetime(2026, 3, 1, tzinfo=timezone.utc)


def _reflection_request(**overrides) -> ReflectionPromptRequest:
    values = {
        "entry_content": "My secret plan is to get a new job and exercise daily.",
        "entry_title": 'Dear "future" me',
        "mood": "hopeful",
        "goals": [Goal("Run a marathon"), Goal("Read more", status="accomplished")],
        "created_at": NOW - timedelta(days=60),
    }
    values.update(overrides)
    return ReflectionPromptRequest(**values)


def test_reflection_prompt_uses_themes_not_entry_text():
    prompt = build_reflection_prompt(_reflection_request(), now=NOW)

    assert "secret plan" not in prompt.user_prompt
    assert "- Key themes: career, health and wellness" in prompt.user_prompt
    assert "- Written: 2 months ago" in prompt.user_prompt
    assert "- Title: Dear 'future' me" in prompt.user_prompt
    assert "Mood: hopeful" in prompt.user_prompt
    assert prompt.user_prompt.endswith("Create a reflection question about these themes.")
    assert "Never quote the entry directly" in prompt.system_instruction


def test_reflection_prompt_is_deterministic():
    request = _reflection_request()

    first = build_reflection_prompt(request, now=NOW)
    second = build_reflection_prompt(request, now=NOW)

    assert first == second


def test_reflection_prompt_drops_missing_context():
    prompt = build_reflection_prompt(
        _reflection_request(mood=None, goals=[], entry_title=None, created_at=None),
        now=NOW,
    )

    assert "Mood:" not in prompt.user_prompt
    assert "Goals set" not in prompt.user_prompt
    assert "- Title: Untitled" in prompt.user_prompt
    assert "- Written: some time ago" in prompt.user_prompt
    assert "\n\n\n" not in prompt.user_prompt


def test_format_goals_only_shows_non_default_status():
    rendered = format_goals([Goal("Run a marathon"), Goal("Read more", status="accomplished")])

    assert rendered == (
        "Goals set in this entry:\n"
        "- Run a marathon\n"
        "- Read more (accomplished)"
    )
    assert format_goals([]) == ""


def test_writing_prompts_prompt_mentions_count_mood_and_theme():
    prompt = build_writing_prompts_prompt(
        WritingPromptsRequest(mood="tired", theme="gratitude", count=4)
    )

    assert "Generate exactly 4 prompts" in prompt.system_instruction
    assert prompt.user_prompt.startswith("Generate 4 unique writing prompts")
    assert "The user's current mood is: tired" in prompt.user_prompt
    assert "They're interested in writing about: gratitude" in prompt.user_prompt


def test_writing_prompts_prompt_without_optional_context():
    prompt = build_writing_prompts_prompt(WritingPromptsRequest(count=2))

    assert "mood" not in prompt.user_prompt
    assert "interested in" not in prompt.user_prompt


def test_affirmation_prompt_includes_greeting_name_and_stats():
    prompt = build_affirmation_prompt(
        AffirmationRequest(
            display_name="Sam",
            time_of_day="morning",
            usage_stats=UsageStats(current_streak=3, total_entries=1, goals_accomplished=0),
        )
    )

    assert "It is morning, a fresh start to the day." in prompt.user_prompt
    assert "The user's name is Sam." in prompt.user_prompt
    assert "They have a 3-day writing streak. They have written 1 entry." in prompt.user_prompt
    assert "accomplished" not in prompt.user_prompt


def test_usage_stats_omit_non_positive_values():
    assert format_usage_stats(UsageStats()) == ""
    assert format_usage_stats(None) == ""
    assert format_usage_stats(UsageStats(total_entries=2, goals_accomplished=1)) == (
        "They have written 2 entries. They have accomplished 1 goal."
    )


def test_time_of_day_greeting_unknown_is_empty():
    assert time_of_day_greeting("noonish") == ""
    assert time_of_day_greeting(None) == ""
    assert time_of_day_greeting("Evening") == "It is evening, winding down for the day."
