from __future__ import annotations

import pytest

from app.models.prompt import PromptSpec, Rubric, RubricDimension, TaxonomyEntry
from app.models.verification import PhotoHabitVerdict, VerificationKind
from app.utils.prompts import (
    BED_RUBRIC,
    CUSTOM_PHOTO_RUBRIC,
    PHOTO_VERDICT_FORMAT,
    PREDEFINED_HABIT_TYPES,
    PROMPT_CATALOG,
    SCREENSHOT_POLICY_ALLOWED,
    SCREENSHOT_POLICY_REJECTED,
    PromptParams,
    describe_clip,
    get_prompt_spec,
    render_prompt,
)
from app.utils.sanitize import sanitize_for_prompt


def test_bed_rubric_threshold_boundary() -> None:
    assert BED_RUBRIC.max_total == 100
    assert BED_RUBRIC.passes(65) is True
    assert BED_RUBRIC.passes(64) is False
    assert BED_RUBRIC.passes(100) is True
    assert BED_RUBRIC.passes(0) is False


@pytest.mark.parametrize("total", [-1, 101])
def test_rubric_total_out_of_range(total: int) -> None:
    with pytest.raises(ValueError):
        BED_RUBRIC.passes(total)


def test_custom_photo_rubric_weights() -> None:
    assert [d.max_points for d in CUSTOM_PHOTO_RUBRIC.dimensions] == [40, 40, 20]
    assert CUSTOM_PHOTO_RUBRIC.threshold == 65


def test_rubric_dimension_levels_must_reach_max() -> None:
    with pytest.raises(ValueError):
        RubricDimension("PILLOWS", 35, ((30, "close"), (0, "none")))


def test_rubric_threshold_must_be_reachable() -> None:
    dimension = RubricDimension("EFFORT", 10, ((10, "all"), (0, "none")))
    with pytest.raises(ValueError):
        Rubric(title="X", dimensions=(dimension,), threshold=11)


def test_relevant_subjects_must_be_in_taxonomy() -> None:
    with pytest.raises(ValueError):
        PromptSpec(
            key="broken",
            verdict_model=PhotoHabitVerdict,
            max_output_tokens=256,
            preamble=("TASK",),
            response_format=PHOTO_VERDICT_FORMAT,
            taxonomy=(TaxonomyEntry("desk", "a desk"),),
            relevant_subjects=("bed",),
        )


def test_response_format_must_cover_verdict_fields() -> None:
    with pytest.raises(ValueError):
        PromptSpec(
            key="broken",
            verdict_model=PhotoHabitVerdict,
            max_output_tokens=256,
            preamble=("TASK",),
            response_format={"is_verified": "boolean"},
        )


@pytest.mark.parametrize("key", sorted(PROMPT_CATALOG))
def test_every_prompt_renders_completely(key: str) -> None:
    spec = get_prompt_spec(key)
    text = render_prompt(key, PromptParams(habit_name="Read 10 pages", frame_count=4, duration_seconds=9.6))
    assert "$" not in text
    assert "NEVER mention scores, points, or numbers" in text
    assert "2 sentences max" in text
    assert "Reply with exactly one JSON object" in text
    for name in spec.verdict_model.model_fields:
        assert f'"{name}"' in text


def test_bed_prompt_structure() -> None:
    text = render_prompt(VerificationKind.BED)
    assert text.startswith("ROLE: You are a friendly morning habit verifier.")
    assert "STEP 1: IDENTIFY WHAT'S IN THE PHOTO" in text
    assert '- "couch" - sofa or loveseat (NOT a bed)' in text
    assert 'If detected_subject is NOT "bed", respond immediately:' in text
    assert "DUVET/COMFORTER (0-35):" in text
    assert "- is_made = true ONLY if score >= 65" in text
    assert text.rstrip().endswith('{"is_made": boolean, "detected_subject": "bed", "feedback": "specific message"}')


def test_custom_photo_interpolates_habit_and_criteria() -> None:
    params = PromptParams(habit_name="Meditate", criteria_text="A yoga mat with a person sitting")
    text = render_prompt(VerificationKind.CUSTOM_PHOTO, params)
    assert 'custom habit "Meditate"' in text
    assert "User's verification criteria: A yoga mat with a person sitting" in text
    assert "I need to see proof of Meditate!" in text
    assert SCREENSHOT_POLICY_REJECTED in text
    assert SCREENSHOT_POLICY_ALLOWED not in text


def test_custom_photo_blank_criteria_falls_back() -> None:
    text = render_prompt(VerificationKind.CUSTOM_PHOTO, PromptParams(habit_name="Meditate", criteria_text="   "))
    assert "User's verification criteria: Verify that this habit has been completed." in text


def test_custom_photo_screenshot_policy_allowed() -> None:
    text = render_prompt(VerificationKind.CUSTOM_PHOTO, PromptParams(habit_name="Call mom", allow_screenshots=True))
    assert SCREENSHOT_POLICY_ALLOWED in text
    assert SCREENSHOT_POLICY_REJECTED not in text


def test_video_prompt_frames_and_duration() -> None:
    text = render_prompt(
        VerificationKind.CUSTOM_VIDEO,
        PromptParams(habit_name="pushups", frame_count=3, duration_seconds=12.4),
    )
    assert "You are seeing 3 frames extracted from a 12-second video" in text
    assert "User's verification criteria: Verify that this action was performed." in text
    assert "STEP 1: CRITICAL - ANALYZE AS A SEQUENCE" in text
    assert 'The action matches the habit "pushups"' in text


def test_video_prompt_without_duration() -> None:
    assert describe_clip(None) == "a short video"
    text = render_prompt(VerificationKind.CUSTOM_VIDEO, PromptParams(habit_name="pushups", frame_count=5))
    assert "You are seeing 5 frames extracted from a short video" in text


def test_catalog_values_are_interpolated_verbatim() -> None:
    text = render_prompt(VerificationKind.CUSTOM_PHOTO, PromptParams(habit_name='Say "hi"'))
    assert 'custom habit "Say "hi""' in text


def test_predefined_types_are_all_in_catalog() -> None:
    assert set(PREDEFINED_HABIT_TYPES) <= set(PROMPT_CATALOG)
    for habit_type in ("healthyBreakfast", "morningJournal", "vitamins", "skincare", "mealPrep"):
        assert get_prompt_spec(habit_type).max_output_tokens == 256


def test_unknown_key_raises_key_error() -> None:
    with pytest.raises(KeyError):
        get_prompt_spec("yoga")


def test_sanitize_flattens_and_escapes() -> None:
    assert sanitize_for_prompt('Say "hi"\nnow\r') == 'Say \\"hi\\" now'
    assert sanitize_for_prompt("back\\slash") == "back\\\\slash"
    assert sanitize_for_prompt("  padded  ") == "padded"


def test_sanitize_truncates_and_handles_empty() -> None:
    assert len(sanitize_for_prompt("a" * 2500)) == 2000
    assert sanitize_for_prompt("") == ""
    assert sanitize_for_prompt(None) == ""
