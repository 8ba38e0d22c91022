"""Tests for settings and logging setup."""

import json

import structlog

from fieldrules.config import Settings, get_settings
from fieldrules import logging_config
from fieldrules.logging_config import configure_logging
from fieldrules.validators import Rule, Validation, ValidationEngine, ValidatorRegistry
from fieldrules.validators.required_validator import RequiredValidator


def test_settings_defaults(monkeypatch):
    for name in ("LOG_LEVEL", "LOG_JSON", "LOG_FILE", "LOG_EXECUTIONS"):
        monkeypatch.delenv(f"FIELDRULES_{name}", raising=False)
    settings = Settings(_env_file=None)
    assert settings.LOG_LEVEL == "info"
    assert settings.LOG_JSON is False
    assert settings.LOG_FILE == ""
    assert settings.LOG_EXECUTIONS is True


def test_settings_from_environment(monkeypatch):
    monkeypatch.setenv("FIELDRULES_LOG_LEVEL", "warning")
    monkeypatch.setenv("FIELDRULES_LOG_EXECUTIONS", "false")
    settings = Settings(_env_file=None)
    assert settings.LOG_LEVEL == "warning"
    assert settings.LOG_EXECUTIONS is False


def test_get_settings_is_cached():
    assert get_settings() is get_settings()


def test_file_sink_receives_json_lines(tmp_path):
    log_file = tmp_path / "validation.log"
    configure_logging(Settings(_env_file=None, LOG_LEVEL="info", LOG_JSON=True, LOG_FILE=str(log_file)))

    registry = ValidatorRegistry([RequiredValidator])
    ValidationEngine(registry=registry).execute(Validation(), {"a": (Rule("required"),)}, {"a": ""})

    lines = [json.loads(line) for line in log_file.read_text(encoding="utf-8").splitlines()]
    events = [line["event"] for line in lines]
    assert "validator_registered" in events
    assert "validation_complete" in events
    # debug events are filtered at info level
    assert "validator_executed" not in events
    assert all(line["level"] for line in lines)


def test_results_do_not_depend_on_logging(tmp_path):
    registry = ValidatorRegistry([RequiredValidator])
    rule_map = {"a": (Rule("required"),)}

    unconfigured = ValidationEngine(registry=registry).execute(Validation(), rule_map, {"a": ""})
    configure_logging(Settings(_env_file=None, LOG_LEVEL="critical", LOG_FILE=str(tmp_path / "x.log")))
    configured = ValidationEngine(registry=registry).execute(Validation(), rule_map, {"a": ""})

    assert unconfigured == configured
    structlog.reset_defaults()


def test_reconfiguring_closes_previous_file_sink(tmp_path):
    configure_logging(Settings(_env_file=None, LOG_FILE=str(tmp_path / "first.log")))
    first_sink = logging_config._file_sink

    configure_logging(Settings(_env_file=None, LOG_FILE=str(tmp_path / "second.log")))
    assert first_sink.closed
    assert logging_config._file_sink is not first_sink
    assert not logging_config._file_sink.closed

    configure_logging(Settings(_env_file=None))
    assert logging_config._file_sink is None
