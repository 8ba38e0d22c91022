"""Validation Engine — runs each field's rule chain and collects failure records.

This is the main entry point for validation.

Usage:
    engine = ValidationEngine()
    report = engine.validate(form)
    if not report.passed:
        render(report.errors)   # {"username": "username is required", ...}

Lower level, with an already resolved rule map:
    failures = engine.execute(policy, rule_map, {"username": "", "password": "abc"})
"""

import inspect
import time
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any, Callable, Iterable, Optional, Sequence

import structlog

from fieldrules.config import Settings, get_settings
from fieldrules.validators.declarations import get_policy
from fieldrules.validators.models import FailureRecord, RuleMap, ValidateContext, Validation, ValidationReport
from fieldrules.validators.registry import ValidatorRegistry, default_registry
from fieldrules.validators.resolver import (
    DeclaredField,
    RuleResolver,
    default_resolver,
    parameter_fields,
    shape_fields,
)

logger = structlog.get_logger()


class ValidationEngine:
    """Executes rule maps against field values.

    Design principles:
        - Violations are data: execute() returns FailureRecords, never raises for them
        - First failing rule wins per field; later rules for that field never run
        - full_mode=False stops after the first failing field
        - Unregistered validator names are skipped (no validator, no check)
    """

    def __init__(
        self,
        registry: Optional[ValidatorRegistry] = None,
        resolver: Optional[RuleResolver] = None,
        settings: Optional[Settings] = None,
    ):
        """Initialize with the default registry and resolver or injected ones.

        Args:
            registry: Validators to look rules up in. If None, uses default_registry.
            resolver: Rule resolver (and its cache). If None, uses default_resolver.
            settings: If None, uses get_settings().
        """
        self.registry = registry if registry is not None else default_registry
        self.resolver = resolver if resolver is not None else default_resolver
        self.settings = settings or get_settings()

    def execute(
        self,
        policy: Optional[Validation],
        rule_map: Optional[RuleMap],
        field_values: Mapping[str, Any],
    ) -> set[FailureRecord]:
        """Run the rule chain of every field present in field_values.

        Args:
            policy: Policy of the validated shape; None means not validated
            rule_map: Field name -> ordered rules, as produced by the resolver
            field_values: Field name -> live value

        Returns:
            At most one FailureRecord per field (empty set = valid)
        """
        failures: set[FailureRecord] = set()
        if policy is None or not rule_map:
            logger.debug("validation_skipped", has_policy=policy is not None)
            return failures

        start_time = time.perf_counter()
        # One read-only view shared by every context of this call
        view = MappingProxyType(dict(field_values))

        for field_name in field_values:
            rules = rule_map.get(field_name)
            if not rules:
                continue

            for rule in rules:
                validator = self.registry.get(rule.name)
                if validator is None:
                    logger.debug("validator_not_found", validator=rule.name, field=field_name)
                    continue

                context = ValidateContext.build(field_name, rule, view)
                try:
                    message = validator.validate(context)
                except Exception as e:
                    logger.error(
                        "validator_failed",
                        validator=rule.name,
                        field=field_name,
                        error=str(e),
                    )
                    raise

                if self.settings.LOG_EXECUTIONS:
                    logger.debug(
                        "validator_executed",
                        validator=rule.name,
                        field=field_name,
                        passed=not message,
                    )

                if message:
                    failures.add(FailureRecord(field_name=field_name, message=message))
                    break

            if failures and not policy.full_mode:
                break

        logger.info(
            "validation_complete",
            full_mode=policy.full_mode,
            fields=len(field_values),
            failures=len(failures),
            duration_ms=round((time.perf_counter() - start_time) * 1000, 2),
        )
        return failures

    def validate(self, obj: Any) -> ValidationReport:
        """Validate an instance of a class declared with @validation.

        Values of nested model fields are flattened under the same names the
        resolver uses for their rules.
        """
        shape = type(obj)
        policy, rule_map = self.resolver.resolve_for_shape(shape)
        if policy is None:
            logger.debug("validation_skipped", target=shape.__qualname__)
            return ValidationReport.build(set())

        values = _collect(obj, shape_fields(shape), set())
        return ValidationReport.build(self.execute(policy, rule_map, values))

    def validate_call(
        self,
        func: Callable,
        *args: Any,
        names: Optional[Sequence[str]] = None,
        **kwargs: Any,
    ) -> ValidationReport:
        """Validate the arguments of a call to func without calling it.

        Args:
            func: Callable declared with @validation
            *args, **kwargs: The call's arguments
            names: One name per positional parameter, as for resolve_for_parameters
        """
        policy, rule_map = self.resolver.resolve_for_parameters(func, names)
        if policy is None:
            logger.debug("validation_skipped", target=getattr(func, "__qualname__", repr(func)))
            return ValidationReport.build(set())

        bound = inspect.signature(func).bind_partial(*args, **kwargs)
        bound.apply_defaults()
        values = _collect(bound.arguments, parameter_fields(func, names), set())
        return ValidationReport.build(self.execute(policy, rule_map, values))


# ── Value flattening ──

def _read(source: Any, attr: str) -> Any:
    if isinstance(source, Mapping):
        return source.get(attr)
    return getattr(source, attr, None)


def _collect(source: Any, fields: Iterable[DeclaredField], seen: set[int]) -> dict[str, Any]:
    """Flat name -> value map matching the flat rule map.

    Mirrors the resolver: model fields without rules of their own are
    replaced by their nested shape's fields, later names overwriting earlier.
    """
    values: dict[str, Any] = {}
    for declared in fields:
        value = _read(source, declared.attr)
        if declared.recurses:
            if value is None or id(value) in seen or get_policy(declared.model_type) is None:
                continue
            values.update(_collect(value, shape_fields(declared.model_type), seen | {id(value)}))
        else:
            values[declared.key] = value
    return values


# Module-level singleton
validation_engine = ValidationEngine()
