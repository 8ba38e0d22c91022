"""Exceptions raised by the validation engine.

Rule violations are never raised. They come back from the engine as
FailureRecord data. Only broken setup is an exception.
"""

from typing import Optional


class FieldRulesError(Exception):
    """Base class for all fieldrules errors."""


class RegistrationError(FieldRulesError):
    """A validator could not be instantiated and registered."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause


class ResolutionError(FieldRulesError):
    """Rule metadata on a shape or callable is malformed."""
