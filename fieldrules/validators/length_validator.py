"""Length Validator — string length within [min, max].

Params: min (default 0), max (default 0 = unbounded).
"""

from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext


class LengthValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "length"

    def validate(self, context: ValidateContext) -> Optional[str]:
        value = context.field_value
        if self._is_blank(value):
            return None

        min_len = self._int_param(context, 0, 0)
        max_len = self._int_param(context, 1, 0)
        length = len(value) if isinstance(value, (list, tuple, set, dict)) else len(str(value))

        if length < min_len or (max_len > 0 and length > max_len):
            if max_len > 0:
                default = f"{context.field_name} must be between {min_len} and {max_len} characters"
            else:
                default = f"{context.field_name} must be at least {min_len} characters"
            return self._message(context, default)
        return None
