"""
Verification module - proof verification pipeline
"""
from . import parser
from . import service

from .parser import parse_verdict
from .service import (
    run_verification,
    verify_photo,
    verify_custom_habit,
    verify_video,
    verify_predefined_habit
)

__all__ = [
    # Modules
    'parser',
    'service',

    # Service functions
    'parse_verdict',
    'run_verification',
    'verify_photo',
    'verify_custom_habit',
    'verify_video',
    'verify_predefined_habit'
]
