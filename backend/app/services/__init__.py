"""
Business logic services
"""
from . import external
from . import verification

__all__ = [
    'external',
    'verification'
]
