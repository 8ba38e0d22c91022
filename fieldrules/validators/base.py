"""Base validator — abstract class implementing the Strategy Pattern.

Each validator is a standalone, independently testable unit registered
under a unique name. New validators are added without modifying the engine.
"""

import math
from abc import ABC, abstractmethod
from collections.abc import Collection
from typing import Any, Optional

from fieldrules.validators.models import ValidateContext


class BaseValidator(ABC):
    """Abstract base for all field validators.

    Contract:
        - name is unique within a registry; re-registering a name replaces it
        - validate() returns None or "" when the value passes, a message when it fails
        - Instances are created once and shared, so no per-call state on self
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Name rules refer to this validator by."""
        ...

    @abstractmethod
    def validate(self, context: ValidateContext) -> Optional[str]:
        """Check context.field_value against this rule.

        Args:
            context: Field under test, its value, rule params and custom message

        Returns:
            None (or empty) on success, otherwise the failure message
        """
        ...

    # ── Helper Methods ──

    def _message(self, context: ValidateContext, default: str) -> str:
        """Custom message from the rule wins over the validator's own wording."""
        return context.message or default

    def _is_blank(self, value: Any) -> bool:
        """True for None, whitespace-only strings and empty collections."""
        if value is None:
            return True
        if isinstance(value, str):
            return not value.strip()
        if isinstance(value, Collection):
            return len(value) == 0
        return False

    def _as_number(self, value: Any) -> Optional[float]:
        """Finite float from a number or numeric string, else None."""
        # bool is an int subclass but never a meaningful number here
        if isinstance(value, bool) or value is None:
            return None
        try:
            if isinstance(value, (int, float)):
                number = float(value)
            else:
                number = float(str(value).strip())
        except (ValueError, OverflowError):
            return None
        # nan compares false against every bound, inf is not a usable value
        return number if math.isfinite(number) else None

    def _int_param(self, context: ValidateContext, index: int, default: int) -> int:
        raw = context.param(index)
        if raw is None:
            return default
        try:
            return int(raw)
        except ValueError:
            raise ValueError(
                f"Validator '{self.name}' param #{index + 1} must be an integer, got {raw!r}"
            ) from None

    def _float_param(self, context: ValidateContext, index: int) -> Optional[float]:
        raw = context.param(index)
        if raw is None:
            return None
        try:
            return float(raw)
        except ValueError:
            raise ValueError(
                f"Validator '{self.name}' param #{index + 1} must be a number, got {raw!r}"
            ) from None
