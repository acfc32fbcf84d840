"""
Pydantic models and prompt structures for the application
"""
from app.models.verification import (
    VerificationKind,
    ConfidenceLevel,
    PhotoVerificationRequest,
    CustomHabitVerificationRequest,
    VideoVerificationRequest,
    PredefinedHabitVerificationRequest,
    Verdict,
    BedVerdict,
    SunlightVerdict,
    HydrationVerdict,
    PhotoHabitVerdict,
    VideoHabitVerdict
)
from app.models.prompt import (
    TaxonomyEntry,
    RubricDimension,
    Rubric,
    PromptSection,
    PromptSpec
)

__all__ = [
    "VerificationKind",
    "ConfidenceLevel",
    "PhotoVerificationRequest",
    "CustomHabitVerificationRequest",
    "VideoVerificationRequest",
    "PredefinedHabitVerificationRequest",
    "Verdict",
    "BedVerdict",
    "SunlightVerdict",
    "HydrationVerdict",
    "PhotoHabitVerdict",
    "VideoHabitVerdict",
    "TaxonomyEntry",
    "RubricDimension",
    "Rubric",
    "PromptSection",
    "PromptSpec"
]
