"""Required Validator — the value must be present and non-blank."""

from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext


class RequiredValidator(BaseValidator):
    """Fails on None, blank strings and empty collections."""

    @property
    def name(self) -> str:
        return "required"

    def validate(self, context: ValidateContext) -> Optional[str]:
        if self._is_blank(context.field_value):
            return self._message(context, f"{context.field_name} is required")
        return None
