"""Validation models: rule descriptors, policy, per-rule context, failure records, report.

All models are immutable once built so rule maps can be cached and shared
across concurrent validations.
"""

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, PrivateAttr, field_validator


class ValidateRule(BaseModel):
    """One rule attached to a field: validator name, its params, optional custom message."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    params: tuple[str, ...] = ()
    message: str = ""

    @field_validator("params", mode="before")
    @classmethod
    def _coerce_params(cls, value):
        if isinstance(value, str):
            return (value,)
        return tuple(str(v) for v in value)


def Rule(name: str, *params: Any, message: str = "") -> ValidateRule:
    """Shorthand: Rule("length", 6, 20, message="6 to 20 characters")."""
    return ValidateRule(name=name, params=tuple(str(p) for p in params), message=message)


class Validation(BaseModel):
    """Shape-level validation policy.

    A shape carrying a Validation is validated; one without is skipped.
    full_mode=True collects a failure for every failing field,
    full_mode=False stops at the first failing field.
    """

    model_config = ConfigDict(frozen=True)

    full_mode: bool = False


# field name -> ordered rules; returned wrapped in MappingProxyType
RuleMap = Mapping[str, tuple[ValidateRule, ...]]


def freeze_rule_map(rules: dict[str, tuple[ValidateRule, ...]]) -> RuleMap:
    return MappingProxyType(dict(rules))


class ValidateContext(BaseModel):
    """What a validator sees for one rule invocation. Built fresh per call."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    field_name: str
    field_value: Any = None
    params: tuple[str, ...] = ()
    message: str = ""

    _values: Mapping[str, Any] = PrivateAttr(default_factory=dict)

    @classmethod
    def build(cls, field_name: str, rule: ValidateRule, field_values: Mapping[str, Any]) -> "ValidateContext":
        ctx = cls(
            field_name=field_name,
            field_value=field_values.get(field_name),
            params=rule.params,
            message=rule.message,
        )
        ctx._values = field_values if isinstance(field_values, MappingProxyType) else MappingProxyType(dict(field_values))
        return ctx

    def get_field_value(self, field_name: str) -> Any:
        """Value of another field in the same validation request (cross-field checks)."""
        return self._values.get(field_name)

    def param(self, index: int, default: Optional[str] = None) -> Optional[str]:
        """Positional param, or default when the rule supplied fewer."""
        if index < len(self.params) and self.params[index] != "":
            return self.params[index]
        return default


class FailureRecord(BaseModel):
    """A field paired with the message of its first failing rule."""

    model_config = ConfigDict(frozen=True)

    field_name: str
    message: str


class ValidationReport(BaseModel):
    """Failure set packaged for callers that render per-field messages."""

    passed: bool
    failures: list[FailureRecord] = Field(default_factory=list)

    @property
    def errors(self) -> dict[str, str]:
        """field name -> message, ready to show next to form fields."""
        return {f.field_name: f.message for f in self.failures}

    @classmethod
    def build(cls, failures: set[FailureRecord]) -> "ValidationReport":
        return cls(
            passed=not failures,
            failures=sorted(failures, key=lambda f: f.field_name),
        )
