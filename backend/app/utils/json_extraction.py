"""
Response Extractor - isolate the JSON object embedded in free-form model output
"""
import logging
import re

from app.core.exceptions import ExtractionError

logger = logging.getLogger(__name__)

FENCE = "```"
OPENING_FENCE = re.compile(r"^```[\w+-]*")


def strip_code_fences(text: str) -> str:
    """Remove a leading ``` / ```json fence and a trailing ``` fence, then trim"""
    cleaned = text.strip()
    cleaned = OPENING_FENCE.sub("", cleaned, count=1)
    if cleaned.endswith(FENCE):
        cleaned = cleaned[:-len(FENCE)]
    return cleaned.strip()


def extract_json_span(raw_text: str) -> str:
    """
    Recover the single JSON object from upstream text.

    Best-effort: assumes at most one object and no braces in surrounding
    prose. Slices from the first "{" to the last "}" inclusive after
    removing code fences.

    Args:
        raw_text: Text returned by the inference backend

    Returns:
        The candidate JSON object text

    Raises:
        ExtractionError if no "{" ... "}" span exists
    """
    if raw_text is None:
        raise ExtractionError("Upstream text is empty")

    cleaned = strip_code_fences(raw_text)
    start = cleaned.find("{")
    end = cleaned.rfind("}")

    if start == -1 or end == -1 or end < start:
        logger.warning(f"[EXTRACT] ✗ No JSON object boundaries in {len(raw_text)} chars of upstream text")
        raise ExtractionError("No JSON object found in upstream response")

    return cleaned[start:end + 1]
