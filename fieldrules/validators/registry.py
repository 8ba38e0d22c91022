"""Validator registry — name -> validator instance.

Writers are serialized by a lock and publish a fresh dict on every change,
so lookups never take the lock and never see a half-updated mapping.
"""

import threading
from typing import Callable, Optional, Union

import structlog

from fieldrules.validators.base import BaseValidator
from fieldrules.validators.exceptions import RegistrationError

from fieldrules.validators.required_validator import RequiredValidator
from fieldrules.validators.regex_validator import RegexValidator
from fieldrules.validators.email_validator import EmailValidator
from fieldrules.validators.length_validator import LengthValidator
from fieldrules.validators.date_validator import DateValidator
from fieldrules.validators.numeric_validator import NumericValidator
from fieldrules.validators.compare_validator import CompareValidator

logger = structlog.get_logger()

ValidatorFactory = Union[type[BaseValidator], Callable[[], BaseValidator]]

BUILTIN_VALIDATORS: tuple[type[BaseValidator], ...] = (
    RequiredValidator,
    RegexValidator,
    EmailValidator,
    LengthValidator,
    DateValidator,
    NumericValidator,
    CompareValidator,
)


class ValidatorRegistry:
    """Holds one shared instance per validator name."""

    def __init__(self, validators: Optional[list[ValidatorFactory]] = None):
        """Initialize with the built-in validators or a custom list.

        Args:
            validators: Classes or zero-argument factories to register.
                If None, registers BUILTIN_VALIDATORS. Pass [] for an empty registry.
        """
        self._lock = threading.Lock()
        self._validators: dict[str, BaseValidator] = {}
        for factory in BUILTIN_VALIDATORS if validators is None else validators:
            self.register(factory)

    def register(self, factory: ValidatorFactory) -> BaseValidator:
        """Instantiate a validator and store it under its name.

        An existing entry with the same name is replaced.

        Args:
            factory: Validator class or zero-argument callable returning a validator

        Returns:
            The registered instance

        Raises:
            RegistrationError: If construction fails or does not yield a named validator.
                The registry is left unchanged.
        """
        label = getattr(factory, "__name__", repr(factory))
        try:
            validator = factory()
            name = validator.name
        except Exception as e:
            logger.error("validator_registration_failed", validator=label, error=str(e))
            raise RegistrationError(f"Cannot instantiate validator {label}: {e}", cause=e) from e

        if not isinstance(validator, BaseValidator) and not callable(getattr(validator, "validate", None)):
            logger.error("validator_registration_failed", validator=label, error="no validate()")
            raise RegistrationError(f"{label} did not produce a validator")
        if not isinstance(name, str) or not name:
            logger.error("validator_registration_failed", validator=label, error="empty name")
            raise RegistrationError(f"{label} produced a validator without a name")

        with self._lock:
            updated = dict(self._validators)
            replaced = updated.get(name)
            updated[name] = validator
            self._validators = updated

        if replaced is not None:
            logger.warning(
                "validator_replaced",
                name=name,
                previous=type(replaced).__name__,
                current=type(validator).__name__,
            )
        else:
            logger.info("validator_registered", name=name, validator=type(validator).__name__)
        return validator

    def unregister(self, name: str) -> bool:
        """Remove a validator by name. Returns False if it was not registered."""
        with self._lock:
            if name not in self._validators:
                return False
            updated = dict(self._validators)
            del updated[name]
            self._validators = updated
        logger.info("validator_unregistered", name=name)
        return True

    def get(self, name: str) -> Optional[BaseValidator]:
        """Look up a validator; None means no such validator."""
        return self._validators.get(name)

    def names(self) -> list[str]:
        return sorted(self._validators)

    def __contains__(self, name: object) -> bool:
        return name in self._validators

    def __len__(self) -> int:
        return len(self._validators)


# Module-level default, pre-populated with the built-ins
default_registry = ValidatorRegistry()


def register_validator(cls: type[BaseValidator]) -> type[BaseValidator]:
    """Class decorator registering a validator in the default registry.

    Usage:
        @register_validator
        class PhoneValidator(BaseValidator):
            ...
    """
    default_registry.register(cls)
    return cls
