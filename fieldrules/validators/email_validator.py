"""Email Validator — syntactic check of a single e-mail address."""

import re
from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext

# local@domain.tld, no whitespace, dotted domain with a 2+ letter TLD
EMAIL_PATTERN = re.compile(
    r"[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+(?:\.[A-Za-z0-9!#$%&'*+/=?^_`{|}~-]+)*"
    r"@(?:[A-Za-z0-9](?:[A-Za-z0-9-]*[A-Za-z0-9])?\.)+[A-Za-z]{2,}"
)


class EmailValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "email"

    def validate(self, context: ValidateContext) -> Optional[str]:
        if self._is_blank(context.field_value):
            return None
        if EMAIL_PATTERN.fullmatch(str(context.field_value).strip()) is None:
            return self._message(context, f"{context.field_name} is not a valid email address")
        return None
