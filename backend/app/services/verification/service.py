"""
Verification Service - render, call upstream, extract and parse one verdict
Each request runs Validated -> UpstreamCalled -> Extracted -> Parsed with no retries
"""
import logging
from typing import Optional, Sequence

from app.core.constants import MAX_TOKENS_PREDEFINED
from app.core.exceptions import RequestInvalidError, UpstreamError
from app.models.verification import Verdict, VerificationKind
from app.services.external.inference import InferenceClient
from app.services.verification.parser import parse_verdict
from app.utils.json_extraction import extract_json_span
from app.utils.prompts import PREDEFINED_HABIT_TYPES, PromptParams, get_prompt_spec, render_prompt
from app.utils.sanitize import sanitize_for_prompt

logger = logging.getLogger(__name__)

PHOTO_KINDS = (VerificationKind.BED, VerificationKind.SUNLIGHT, VerificationKind.HYDRATION)


def run_verification(
    key,
    images: Sequence[str],
    client: Optional[InferenceClient],
    params: Optional[PromptParams] = None,
    label_frames: bool = False,
    max_output_tokens: Optional[int] = None,
) -> Verdict:
    """
    Run the verification pipeline for one validated request

    Args:
        key: VerificationKind or catalog key string
        images: Non-empty base64 payloads in request order
        client: Inference client injected at startup (None if unconfigured)
        params: Prompt interpolation values
        label_frames: Pair each image with a frame-index label
        max_output_tokens: Override the catalog entry's max output tokens

    Returns:
        Parsed Verdict

    Raises:
        RequestInvalidError if images is empty (no upstream call is made)
        UpstreamError, ExtractionError, SchemaViolationError on later failures
    """
    if not images:
        raise RequestInvalidError("At least one image is required")

    spec = get_prompt_spec(key)
    tag = f"[VERIFY {spec.key.upper()}]"

    if client is None:
        raise UpstreamError("Inference client is not configured")

    prompt = render_prompt(spec.key, params)
    logger.info(f"{tag} Validated: {len(images)} image(s), prompt {len(prompt)} chars")

    budget = max_output_tokens or spec.max_output_tokens
    raw_text = client.invoke(images, prompt, budget, label_frames=label_frames)
    logger.info(f"{tag} Upstream called: {len(raw_text)} chars returned")

    json_span = extract_json_span(raw_text)
    logger.info(f"{tag} Extracted {len(json_span)}-char JSON span")

    verdict = parse_verdict(spec.key, json_span)
    logger.info(f"{tag} ✓ Parsed: passed={verdict.passed}, detected={verdict.detected!r}")
    return verdict


def verify_photo(kind: VerificationKind, image_base64: str, client: Optional[InferenceClient]) -> Verdict:
    """Verify one of the fixed photo kinds (bed, sunlight, hydration)"""
    if kind not in PHOTO_KINDS:
        raise ValueError(f"{kind.value} is not a fixed photo kind")
    return run_verification(kind, [image_base64], client)


def verify_custom_habit(
    image_base64: str,
    habit_name: str,
    client: Optional[InferenceClient],
    ai_prompt: Optional[str] = None,
    allows_screenshots: bool = False,
) -> Verdict:
    """Verify a photo against a user-defined habit and criteria"""
    params = PromptParams(
        habit_name=sanitize_for_prompt(habit_name),
        criteria_text=sanitize_for_prompt(ai_prompt) if ai_prompt else None,
        allow_screenshots=allows_screenshots,
    )
    return run_verification(VerificationKind.CUSTOM_PHOTO, [image_base64], client, params)


def verify_video(
    frames: Sequence[str],
    habit_name: str,
    client: Optional[InferenceClient],
    ai_prompt: Optional[str] = None,
    duration: Optional[float] = None,
) -> Verdict:
    """Verify a short clip, sampled as ordered frames, against a user-defined habit"""
    params = PromptParams(
        habit_name=sanitize_for_prompt(habit_name),
        criteria_text=sanitize_for_prompt(ai_prompt) if ai_prompt else None,
        frame_count=len(frames),
        duration_seconds=duration,
    )
    return run_verification(VerificationKind.CUSTOM_VIDEO, list(frames), client, params, label_frames=True)


def verify_predefined_habit(habit_type: str, image_base64: str, client: Optional[InferenceClient]) -> Verdict:
    """
    Verify a photo for a catalog habit selected by type

    Raises:
        RequestInvalidError for a habit type outside the predefined catalog
    """
    if habit_type not in PREDEFINED_HABIT_TYPES:
        raise RequestInvalidError(f"Unknown habit type: {habit_type}")
    return run_verification(habit_type, [image_base64], client, max_output_tokens=MAX_TOKENS_PREDEFINED)
