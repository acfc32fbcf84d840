"""
Pydantic models for verification requests and verdicts
"""
from enum import Enum
from typing import ClassVar, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.core.constants import (
    MAX_AI_PROMPT_LENGTH,
    MAX_HABIT_NAME_LENGTH,
    MAX_IMAGE_SIZE_BYTES,
)


class VerificationKind(str, Enum):
    """Verification category selecting which prompt and schema apply"""
    BED = "bed"
    SUNLIGHT = "sunlight"
    HYDRATION = "hydration"
    CUSTOM_PHOTO = "custom-photo"
    CUSTOM_VIDEO = "custom-video"


class ConfidenceLevel(str, Enum):
    """Confidence levels reported for video verification"""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


def estimate_decoded_size(image_base64: str) -> int:
    """Approximate decoded byte size of a base64 payload"""
    return len(image_base64) * 3 // 4


def _check_image_size(image_base64: str) -> str:
    if estimate_decoded_size(image_base64) > MAX_IMAGE_SIZE_BYTES:
        raise ValueError(f"Image must be {MAX_IMAGE_SIZE_BYTES // (1024 * 1024)}MB or less")
    return image_base64


def _check_habit_name(value: str) -> str:
    if not value.strip():
        raise ValueError("Habit name cannot be empty")
    if len(value) > MAX_HABIT_NAME_LENGTH:
        raise ValueError(f"Habit name must be {MAX_HABIT_NAME_LENGTH} characters or less")
    return value


def _check_ai_prompt(value: Optional[str]) -> Optional[str]:
    if value is not None and len(value) > MAX_AI_PROMPT_LENGTH:
        raise ValueError(f"AI prompt must be {MAX_AI_PROMPT_LENGTH} characters or less")
    return value


# ---------------------------------------------------------------------------
# Requests
# ---------------------------------------------------------------------------

class PhotoVerificationRequest(BaseModel):
    """Request body for the bed, sunlight and hydration endpoints"""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(..., alias="imageBase64", min_length=1, description="Base64-encoded JPEG")

    @field_validator("image_base64")
    @classmethod
    def validate_image(cls, v: str) -> str:
        """Reject oversized images before they reach the upstream"""
        return _check_image_size(v)


class CustomHabitVerificationRequest(BaseModel):
    """Request body for a user-defined photo habit"""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(..., alias="imageBase64", min_length=1, description="Base64-encoded JPEG")
    habit_name: str = Field(..., alias="habitName", min_length=1, description="User-defined habit label")
    ai_prompt: Optional[str] = Field(None, alias="aiPrompt", description="User-authored verification criteria")
    allows_screenshots: bool = Field(False, alias="allowsScreenshots", description="Accept screen captures as proof")

    @field_validator("image_base64")
    @classmethod
    def validate_image(cls, v: str) -> str:
        return _check_image_size(v)

    @field_validator("habit_name")
    @classmethod
    def validate_habit_name(cls, v: str) -> str:
        """Habit name must be non-blank and bounded"""
        return _check_habit_name(v)

    @field_validator("ai_prompt")
    @classmethod
    def validate_ai_prompt(cls, v: Optional[str]) -> Optional[str]:
        """Criteria text is optional but bounded"""
        return _check_ai_prompt(v)

    @field_validator("allows_screenshots", mode="before")
    @classmethod
    def default_screenshot_flag(cls, v):
        return False if v is None else v


class VideoVerificationRequest(BaseModel):
    """Request body for a user-defined video habit (ordered frames of a short clip)"""
    model_config = ConfigDict(populate_by_name=True)

    frames: List[str] = Field(..., min_length=1, description="Chronologically ordered base64 JPEG frames")
    habit_name: str = Field(..., alias="habitName", min_length=1, description="User-defined habit label")
    ai_prompt: Optional[str] = Field(None, alias="aiPrompt", description="User-authored verification criteria")
    duration: Optional[float] = Field(None, ge=0, description="Reported clip length in seconds")

    @field_validator("frames")
    @classmethod
    def validate_frames(cls, v: List[str]) -> List[str]:
        """Every frame must be a non-empty, bounded payload"""
        for frame in v:
            if not frame:
                raise ValueError("Frames cannot be empty")
            _check_image_size(frame)
        return v

    @field_validator("habit_name")
    @classmethod
    def validate_habit_name(cls, v: str) -> str:
        return _check_habit_name(v)

    @field_validator("ai_prompt")
    @classmethod
    def validate_ai_prompt(cls, v: Optional[str]) -> Optional[str]:
        return _check_ai_prompt(v)


class PredefinedHabitVerificationRequest(BaseModel):
    """Request body for a catalog habit selected by type"""
    model_config = ConfigDict(populate_by_name=True)

    image_base64: str = Field(..., alias="imageBase64", min_length=1, description="Base64-encoded JPEG")
    habit_type: str = Field(..., alias="habitType", min_length=1, description="Catalog habit type, e.g. 'vitamins'")

    @field_validator("image_base64")
    @classmethod
    def validate_image(cls, v: str) -> str:
        return _check_image_size(v)


# ---------------------------------------------------------------------------
# Verdicts
# ---------------------------------------------------------------------------

class Verdict(BaseModel):
    """
    Parsed, validated result of one verification attempt.

    Subclasses declare the kind-specific pass flag; strict mode means a
    string "true" is a schema violation rather than a passing verdict.
    """
    model_config = ConfigDict(strict=True)

    PASS_FIELD: ClassVar[str] = ""

    @property
    def passed(self) -> bool:
        return getattr(self, self.PASS_FIELD)

    @property
    def detected(self) -> str:
        """What the model reports seeing (subject for photos, action for video)"""
        return getattr(self, "detected_subject", None) or getattr(self, "detected_action", "")


class BedVerdict(Verdict):
    """Structured output for the made-bed check"""
    PASS_FIELD: ClassVar[str] = "is_made"

    is_made: bool = Field(..., description="Whether the bed is made")
    detected_subject: str = Field(..., description="Taxonomy label of what the model saw")
    feedback: str = Field(..., description="Short user-facing feedback, at most 2 sentences")


class SunlightVerdict(Verdict):
    """Structured output for the natural light check"""
    PASS_FIELD: ClassVar[str] = "is_outside"

    is_outside: bool = Field(..., description="Whether natural light exposure is shown")
    detected_subject: str = Field(..., description="Taxonomy label of what the model saw")
    feedback: str = Field(..., description="Short user-facing feedback, at most 2 sentences")


class HydrationVerdict(Verdict):
    """Structured output for the hydration check"""
    PASS_FIELD: ClassVar[str] = "is_water"

    is_water: bool = Field(..., description="Whether a beverage or drinking vessel is shown")
    detected_subject: str = Field(..., description="Taxonomy label of what the model saw")
    feedback: str = Field(..., description="Short user-facing feedback, at most 2 sentences")


class PhotoHabitVerdict(Verdict):
    """Structured output for custom and predefined photo habits"""
    PASS_FIELD: ClassVar[str] = "is_verified"

    is_verified: bool = Field(..., description="Whether the photo proves the habit")
    detected_subject: str = Field(..., description="Brief description of what the model saw")
    feedback: str = Field(..., description="Short user-facing feedback, at most 2 sentences")


class VideoHabitVerdict(Verdict):
    """Structured output for video habits"""
    PASS_FIELD: ClassVar[str] = "is_verified"

    is_verified: bool = Field(..., description="Whether the frames prove the action")
    feedback: str = Field(..., description="Short user-facing feedback, at most 2 sentences")
    detected_action: str = Field(..., description="What the model saw happen across frames")
    confidence: ConfidenceLevel = Field(..., description="Model confidence in the verdict")
