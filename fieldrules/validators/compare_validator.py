"""Compare Validator — cross-field comparison.

Params: the other field's name, then an operator (eq, neq, gt, lt, gte, lte; default eq).
Ordering operators compare as numbers when both sides parse as numbers,
so form strings "10" and "9" order numerically. eq and neq compare raw values.
Typical use: confirm_password must eq password.
"""

import operator
from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext

OPERATORS = {
    "eq": (operator.eq, "must match"),
    "neq": (operator.ne, "must differ from"),
    "gt": (operator.gt, "must be greater than"),
    "lt": (operator.lt, "must be less than"),
    "gte": (operator.ge, "must be greater than or equal to"),
    "lte": (operator.le, "must be less than or equal to"),
}

_ORDERING = {"gt", "lt", "gte", "lte"}


class CompareValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "compare"

    def validate(self, context: ValidateContext) -> Optional[str]:
        other_field = context.param(0)
        if other_field is None:
            raise ValueError("Validator 'compare' needs the name of the field to compare with")

        op_name = context.param(1, "eq").lower()
        if op_name not in OPERATORS:
            raise ValueError(f"Validator 'compare' got unknown operator {op_name!r}")
        op, wording = OPERATORS[op_name]

        value = context.field_value
        other_value = context.get_field_value(other_field)
        if op_name in _ORDERING:
            number, other_number = self._as_number(value), self._as_number(other_value)
            if number is not None and other_number is not None:
                value, other_value = number, other_number
        try:
            ok = op(value, other_value)
        except TypeError:
            # None or mismatched types cannot be ordered
            ok = False

        if not ok:
            return self._message(context, f"{context.field_name} {wording} {other_field}")
        return None
