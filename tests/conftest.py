"""Shared test fixtures."""

from typing import Optional

import pytest
import structlog

from fieldrules.config import Settings
from fieldrules.validators import BaseValidator, RuleResolver, ValidateContext, ValidationEngine, ValidatorRegistry
from fieldrules.validators.length_validator import LengthValidator
from fieldrules.validators.required_validator import RequiredValidator


class RecordingValidator(BaseValidator):
    """Test double: returns a fixed result and records every call."""

    def __init__(self, name: str, result: Optional[str] = None):
        self._name = name
        self.result = result
        self.calls: list[ValidateContext] = []

    @property
    def name(self) -> str:
        return self._name

    def validate(self, context: ValidateContext) -> Optional[str]:
        self.calls.append(context)
        return self.result


@pytest.fixture(autouse=True)
def reset_structlog():
    """Undo any configure_logging() done by a test."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def settings() -> Settings:
    return Settings(LOG_LEVEL="debug", LOG_EXECUTIONS=True)


@pytest.fixture
def registry() -> ValidatorRegistry:
    """Registry with only required and length."""
    return ValidatorRegistry([RequiredValidator, LengthValidator])


@pytest.fixture
def engine(registry, settings) -> ValidationEngine:
    return ValidationEngine(registry=registry, resolver=RuleResolver(), settings=settings)


@pytest.fixture
def full_engine(settings) -> ValidationEngine:
    """Engine over a fresh registry holding every built-in validator."""
    return ValidationEngine(registry=ValidatorRegistry(), resolver=RuleResolver(), settings=settings)
