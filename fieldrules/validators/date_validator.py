"""Date Validator — string values must parse with the strptime format in the first param."""

from datetime import date, datetime
from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext

DEFAULT_DATE_FORMAT = "%Y-%m-%d"


class DateValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "date"

    def validate(self, context: ValidateContext) -> Optional[str]:
        value = context.field_value
        if self._is_blank(value):
            return None
        # Already a date object, nothing to parse
        if isinstance(value, (date, datetime)):
            return None

        fmt = context.param(0, DEFAULT_DATE_FORMAT)
        try:
            datetime.strptime(str(value).strip(), fmt)
        except ValueError:
            return self._message(context, f"{context.field_name} must be a date in format {fmt}")
        return None
