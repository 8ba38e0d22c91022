"""Tests for the built-in validators."""

from datetime import date

import pytest

from fieldrules.validators import Rule, ValidateContext
from fieldrules.validators.compare_validator import CompareValidator
from fieldrules.validators.date_validator import DateValidator
from fieldrules.validators.email_validator import EmailValidator
from fieldrules.validators.length_validator import LengthValidator
from fieldrules.validators.numeric_validator import NumericValidator
from fieldrules.validators.regex_validator import RegexValidator
from fieldrules.validators.required_validator import RequiredValidator


def ctx(value, *params, message="", field="field", **others) -> ValidateContext:
    """Context for `field` = value, with any other fields passed as keywords."""
    return ValidateContext.build(field, Rule("any", *params, message=message), {field: value, **others})


@pytest.mark.parametrize("value", [None, "", "   ", [], {}])
def test_required_fails_on_blank(value):
    assert RequiredValidator().validate(ctx(value)) == "field is required"


@pytest.mark.parametrize("value", ["x", 0, False, [1]])
def test_required_passes_on_present(value):
    assert not RequiredValidator().validate(ctx(value))


def test_required_custom_message():
    assert RequiredValidator().validate(ctx("", message="Please fill in")) == "Please fill in"


def test_regex_full_match():
    validator = RegexValidator()
    assert not validator.validate(ctx("12345", r"\d{5}"))
    assert validator.validate(ctx("123456", r"\d{5}")) == "field has an invalid format"
    assert not validator.validate(ctx("", r"\d{5}"))


def test_regex_without_pattern_is_misconfigured():
    with pytest.raises(ValueError):
        RegexValidator().validate(ctx("abc"))


@pytest.mark.parametrize("value", ["ann@example.com", "first.last+tag@mail.example.org"])
def test_email_valid(value):
    assert not EmailValidator().validate(ctx(value))


@pytest.mark.parametrize("value", ["ann", "ann@", "ann@example", "a b@example.com", "@example.com"])
def test_email_invalid(value):
    assert EmailValidator().validate(ctx(value)) == "field is not a valid email address"


def test_length_bounds():
    validator = LengthValidator()
    assert validator.validate(ctx("abc", 6, 20)) == "field must be between 6 and 20 characters"
    assert not validator.validate(ctx("abcdef", 6, 20))
    assert validator.validate(ctx("x" * 21, 6, 20))
    assert not validator.validate(ctx("", 6, 20))


def test_length_without_max_is_unbounded():
    validator = LengthValidator()
    assert not validator.validate(ctx("x" * 500, 3))
    assert validator.validate(ctx("ab", 3)) == "field must be at least 3 characters"


def test_length_bad_param():
    with pytest.raises(ValueError, match="integer"):
        LengthValidator().validate(ctx("abc", "six"))


def test_date_format():
    validator = DateValidator()
    assert not validator.validate(ctx("2024-02-29"))
    assert validator.validate(ctx("2023-02-29")) == "field must be a date in format %Y-%m-%d"
    assert not validator.validate(ctx("29/02/2024", "%d/%m/%Y"))
    assert not validator.validate(ctx(date(2024, 1, 1)))


def test_numeric():
    validator = NumericValidator()
    assert not validator.validate(ctx("3.5"))
    assert not validator.validate(ctx(7))
    assert validator.validate(ctx("seven")) == "field must be a number"
    assert validator.validate(ctx(True)) == "field must be a number"


@pytest.mark.parametrize("value", ["nan", "inf", "-inf", float("nan"), float("inf")])
def test_numeric_rejects_non_finite(value):
    """nan would slip past every bound, inf is not a usable number."""
    assert NumericValidator().validate(ctx(value)) == "field must be a number"
    assert NumericValidator().validate(ctx(value, 0, 120)) == "field must be a number"


def test_numeric_bounds():
    validator = NumericValidator()
    assert validator.validate(ctx("0", 1, 10)) == "field must be at least 1"
    assert validator.validate(ctx(11, 1, 10)) == "field must be at most 10"
    assert not validator.validate(ctx(5, "", 10))


def test_compare_equal():
    validator = CompareValidator()
    assert not validator.validate(ctx("pw", "password", field="confirm", password="pw"))
    assert validator.validate(ctx("px", "password", field="confirm", password="pw")) == "confirm must match password"


def test_compare_operators():
    validator = CompareValidator()
    assert not validator.validate(ctx(10, "start", "gt", field="end", start=5))
    assert validator.validate(ctx(3, "start", "gte", field="end", start=5))
    assert validator.validate(ctx(3, "start", "gt", field="end", start=None))


def test_compare_orders_numeric_strings_as_numbers():
    validator = CompareValidator()
    assert not validator.validate(ctx("10", "start", "gt", field="end", start="9"))
    assert validator.validate(ctx("9", "start", "gte", field="end", start="10")) == (
        "end must be greater than or equal to start"
    )
    # eq keeps raw comparison, "1e1" is not the same text as "10"
    assert validator.validate(ctx("1e1", "start", field="end", start="10"))


def test_compare_misconfigured():
    with pytest.raises(ValueError):
        CompareValidator().validate(ctx(1))
    with pytest.raises(ValueError):
        CompareValidator().validate(ctx(1, "other", "approx", other=1))
