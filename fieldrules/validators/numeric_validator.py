"""Numeric Validator — value must be a number, optionally within [min, max]."""

from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext


class NumericValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "numeric"

    def validate(self, context: ValidateContext) -> Optional[str]:
        if self._is_blank(context.field_value):
            return None

        number = self._as_number(context.field_value)
        if number is None:
            return self._message(context, f"{context.field_name} must be a number")

        lower = self._float_param(context, 0)
        upper = self._float_param(context, 1)
        if lower is not None and number < lower:
            return self._message(context, f"{context.field_name} must be at least {context.params[0]}")
        if upper is not None and number > upper:
            return self._message(context, f"{context.field_name} must be at most {context.params[1]}")
        return None

