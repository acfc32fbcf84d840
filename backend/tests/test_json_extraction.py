from __future__ import annotations

import pytest

from app.core.exceptions import ExtractionError
from app.utils.json_extraction import extract_json_span, strip_code_fences


def test_plain_object_is_returned_unchanged() -> None:
    text = '{"is_made": true, "detected_subject": "bed", "feedback": "Nice."}'
    assert extract_json_span(text) == text


def test_json_code_fence_is_removed() -> None:
    text = '```json\n{"is_water": false, "detected_subject": "other", "feedback": "No drink."}\n```'
    assert extract_json_span(text) == '{"is_water": false, "detected_subject": "other", "feedback": "No drink."}'


def test_bare_code_fence_is_removed() -> None:
    assert strip_code_fences("```\n{}\n```") == "{}"


def test_surrounding_prose_is_dropped() -> None:
    text = 'Here is my verdict:\n{"is_outside": true, "detected_subject": "outdoors", "feedback": "Sunny!"}\nHope that helps.'
    assert extract_json_span(text) == '{"is_outside": true, "detected_subject": "outdoors", "feedback": "Sunny!"}'


def test_nested_braces_span_first_to_last() -> None:
    text = 'ok {"a": {"b": 1}} done'
    assert extract_json_span(text) == '{"a": {"b": 1}}'


@pytest.mark.parametrize("text", ["", "no json here", "} backwards {", "only an opening {"])
def test_missing_object_boundaries_raise(text: str) -> None:
    with pytest.raises(ExtractionError):
        extract_json_span(text)


def test_none_raises_extraction_error() -> None:
    with pytest.raises(ExtractionError):
        extract_json_span(None)
