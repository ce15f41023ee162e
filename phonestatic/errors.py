"""
Error types raised by the generation pipeline.

Every error is fatal for a run: a partially generated table would be
internally inconsistent, so callers should not try to recover.
"""

from __future__ import annotations


class PhonestaticError(Exception):
    """Base class for generation failures."""


class DataShapeViolation(PhonestaticError, ValueError):
    """Raised when the input snapshot breaks a structural invariant."""

    def __init__(self, message: str, *, key: object = None) -> None:
        super().__init__(message)
        self.key = key


class EmissionFailure(PhonestaticError, OSError):
    """Raised when generated text cannot be written."""
