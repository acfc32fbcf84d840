"""
External integrations module
Handles connections to the upstream inference backends
"""
from . import inference

__all__ = ['inference']
