"""Regex Validator — the whole value must match the pattern given as the first param."""

import re
from functools import lru_cache
from typing import Optional

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.models import ValidateContext


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern:
    return re.compile(pattern)


class RegexValidator(BaseValidator):

    @property
    def name(self) -> str:
        return "regex"

    def validate(self, context: ValidateContext) -> Optional[str]:
        if self._is_blank(context.field_value):
            return None

        pattern = context.param(0)
        if pattern is None:
            raise ValueError("Validator 'regex' needs a pattern param")

        if _compile(pattern).fullmatch(str(context.field_value)) is None:
            return self._message(context, f"{context.field_name} has an invalid format")
        return None
