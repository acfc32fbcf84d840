"""
Verification Routes - one POST endpoint per verification kind
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Response

from app.core.constants import GENERIC_ERROR_MESSAGE
from app.core.dependencies import get_inference_client
from app.core.exceptions import RequestInvalidError, VerificationError
from app.models.verification import (
    CustomHabitVerificationRequest,
    PhotoVerificationRequest,
    PredefinedHabitVerificationRequest,
    VerificationKind,
    VideoVerificationRequest,
)
from app.services.external.inference import InferenceClient
from app.services import verification

logger = logging.getLogger(__name__)

router = APIRouter(tags=["verification"])

VERIFICATION_PATHS = (
    "/verifyBed",
    "/verifySunlight",
    "/verifyHydration",
    "/verifyCustomHabit",
    "/verifyVideo",
    "/verifyPredefinedHabit",
)


def _fail(endpoint: str, error: Exception) -> HTTPException:
    """Log the detailed cause and return the generic, non-leaking 500"""
    if isinstance(error, VerificationError):
        logger.error(f"[{endpoint}] ✗ Failed ({error.code}): {error}")
    else:
        logger.error(f"[{endpoint}] ✗ Unexpected error: {error}", exc_info=True)
    return HTTPException(status_code=500, detail=GENERIC_ERROR_MESSAGE)


def preflight() -> Response:
    """CORS pre-flight: no content"""
    return Response(status_code=204)


for _path in VERIFICATION_PATHS:
    router.add_api_route(_path, preflight, methods=["OPTIONS"], include_in_schema=False)


@router.post("/verifyBed")
def verify_bed(
    request: PhotoVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """Verify that the photo shows a made bed"""
    try:
        return verification.verify_photo(VerificationKind.BED, request.image_base64, client).model_dump(mode="json")
    except Exception as e:
        raise _fail("verifyBed", e)


@router.post("/verifySunlight")
def verify_sunlight(
    request: PhotoVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """Verify that the photo shows natural light exposure"""
    try:
        return verification.verify_photo(VerificationKind.SUNLIGHT, request.image_base64, client).model_dump(mode="json")
    except Exception as e:
        raise _fail("verifySunlight", e)


@router.post("/verifyHydration")
def verify_hydration(
    request: PhotoVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """Verify that the photo shows a beverage or drinking vessel"""
    try:
        return verification.verify_photo(VerificationKind.HYDRATION, request.image_base64, client).model_dump(mode="json")
    except Exception as e:
        raise _fail("verifyHydration", e)


@router.post("/verifyCustomHabit")
def verify_custom_habit(
    request: CustomHabitVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """
    Verify a photo for a user-defined habit

    Example request:
        ```json
        {
            "imageBase64": "/9j/4AAQ...",
            "habitName": "Read 10 pages",
            "aiPrompt": "An open book with visible pages",
            "allowsScreenshots": false
        }
        ```
    """
    try:
        verdict = verification.verify_custom_habit(
            image_base64=request.image_base64,
            habit_name=request.habit_name,
            client=client,
            ai_prompt=request.ai_prompt,
            allows_screenshots=request.allows_screenshots,
        )
        return verdict.model_dump(mode="json")
    except Exception as e:
        raise _fail("verifyCustomHabit", e)


@router.post("/verifyVideo")
def verify_video(
    request: VideoVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """
    Verify a short video, sent as chronologically ordered frames

    Example request:
        ```json
        {
            "frames": ["/9j/...", "/9j/...", "/9j/..."],
            "habitName": "pushups",
            "duration": 12.4
        }
        ```
    """
    try:
        verdict = verification.verify_video(
            frames=request.frames,
            habit_name=request.habit_name,
            client=client,
            ai_prompt=request.ai_prompt,
            duration=request.duration,
        )
        return verdict.model_dump(mode="json")
    except Exception as e:
        raise _fail("verifyVideo", e)


@router.post("/verifyPredefinedHabit")
def verify_predefined_habit(
    request: PredefinedHabitVerificationRequest,
    client: Optional[InferenceClient] = Depends(get_inference_client),
):
    """Verify a photo for a catalog habit selected by habitType"""
    try:
        verdict = verification.verify_predefined_habit(request.habit_type, request.image_base64, client)
        return verdict.model_dump(mode="json")
    except RequestInvalidError as e:
        logger.warning(f"[verifyPredefinedHabit] Rejected: {e}")
        raise HTTPException(status_code=400, detail=str(e))
    except Exception as e:
        raise _fail("verifyPredefinedHabit", e)
