"""Field validators — registry, rule resolution and execution.

Usage:
    from fieldrules.validators import validation_engine

    report = validation_engine.validate(form)
    if not report.passed:
        # Show report.errors next to the form fields
"""

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.declarations import Validate, validation
from fieldrules.validators.engine import ValidationEngine, validation_engine
from fieldrules.validators.exceptions import FieldRulesError, RegistrationError, ResolutionError
from fieldrules.validators.models import (
    FailureRecord,
    Rule,
    RuleMap,
    ValidateContext,
    ValidateRule,
    Validation,
    ValidationReport,
)
from fieldrules.validators.registry import ValidatorRegistry, default_registry, register_validator
from fieldrules.validators.resolver import (
    ResolvedRules,
    RuleResolver,
    default_resolver,
    resolve_for_parameters,
    resolve_for_shape,
)

__all__ = [
    "BaseValidator",
    "FailureRecord",
    "FieldRulesError",
    "RegistrationError",
    "ResolutionError",
    "ResolvedRules",
    "Rule",
    "RuleMap",
    "RuleResolver",
    "Validate",
    "ValidateContext",
    "ValidateRule",
    "Validation",
    "ValidationEngine",
    "ValidationReport",
    "ValidatorRegistry",
    "default_registry",
    "default_resolver",
    "register_validator",
    "resolve_for_parameters",
    "resolve_for_shape",
    "validation",
    "validation_engine",
]
