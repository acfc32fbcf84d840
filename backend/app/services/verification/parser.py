"""
Verdict Parser - strict schema check of the extracted JSON span
"""
import json
import logging

from pydantic import ValidationError

from app.core.exceptions import SchemaViolationError
from app.models.verification import Verdict
from app.utils.prompts import get_prompt_spec

logger = logging.getLogger(__name__)


def _summarize(error: ValidationError) -> str:
    return "; ".join(
        f"{'.'.join(str(part) for part in item['loc']) or '<root>'}: {item['msg']}"
        for item in error.errors()
    )


def parse_verdict(key, json_span: str) -> Verdict:
    """
    Deserialize a JSON span into the kind's verdict model

    No coercion and no defaults: a missing field or a string "true" for a
    boolean is a violation, because callers gate real consequences on it.

    Args:
        key: VerificationKind or catalog key string
        json_span: Output of extract_json_span()

    Returns:
        Verdict subclass instance for the kind

    Raises:
        SchemaViolationError on invalid JSON, a non-object, or a field mismatch
    """
    spec = get_prompt_spec(key)

    try:
        payload = json.loads(json_span)
    except json.JSONDecodeError as e:
        raise SchemaViolationError(f"Extracted span is not valid JSON: {e}") from e

    if not isinstance(payload, dict):
        raise SchemaViolationError(f"Expected a JSON object, got {type(payload).__name__}")

    try:
        verdict = spec.verdict_model.model_validate_json(json_span, strict=True)
    except ValidationError as e:
        raise SchemaViolationError(f"Response does not match {spec.key} schema: {_summarize(e)}") from e

    subject = getattr(verdict, "detected_subject", None)
    if subject is not None and not spec.is_on_taxonomy(subject):
        logger.warning(f"[PARSE] Subject '{subject}' is outside the {spec.key} taxonomy")

    return verdict
