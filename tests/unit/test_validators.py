"""
Tests for the leaf field validators in core.validation.validators.
"""

import math
from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest
from hypothesis import given
from hypothesis import strategies as st

from core.validation import (
    And,
    BooleanValidator,
    CurrencyCode,
    DateTimeValidator,
    DecimalString,
    NumericRange,
    OneOf,
    RegexPattern,
    StringLength,
    URLValidator,
    ViolationCode,
    non_negative,
    positive,
)


class TestStringLength:
    def test_accepts_string_within_bounds(self):
        result = StringLength(max_length=5).validate("abcde")
        assert result.is_valid
        assert result.value == "abcde"

    def test_too_long_is_out_of_range(self):
        result = StringLength(max_length=150).validate("x" * 151)
        assert not result.is_valid
        assert result.code == ViolationCode.OUT_OF_RANGE
        assert result.constraint == "max_length[150]"

    def test_exact_length(self):
        validator = StringLength(min_length=2, max_length=2)
        assert validator.validate("US").is_valid
        assert validator.validate("USA").code == ViolationCode.OUT_OF_RANGE
        assert validator.validate("U").code == ViolationCode.OUT_OF_RANGE
        assert validator.constraint_name == "length[2]"

    @pytest.mark.parametrize("value", [None, 12, 1.5, True, [], {}])
    def test_non_string_is_invalid_type(self, value):
        result = StringLength().validate(value)
        assert result.code == ViolationCode.INVALID_TYPE
        assert result.expected == "string"

    def test_null_reports_null_type(self):
        assert StringLength().validate(None).actual == "null"

    def test_empty_string_is_a_string(self):
        assert StringLength().validate("").is_valid


class TestRegexPattern:
    def test_full_match_required(self):
        validator = RegexPattern(r"[A-Z]{2}", "country code")
        assert validator.validate("US").is_valid
        assert validator.validate("USA").code == ViolationCode.INVALID_FORMAT
        assert validator.constraint_name == "country code"

    def test_digit_class_is_ascii_only(self):
        # Arabic-Indic digits are \d in unicode mode
        assert not RegexPattern(r"\d+").validate("١٢٣").is_valid


class TestOneOf:
    def test_member_passes(self):
        assert OneOf("new", "used").validate("used").is_valid

    def test_non_member_is_invalid_enum_value(self):
        result = OneOf("new", "refurbished", "used").validate("broken")
        assert result.code == ViolationCode.INVALID_ENUM_VALUE
        assert result.expected == ["new", "refurbished", "used"]

    def test_case_sensitive(self):
        assert OneOf("in_stock").validate("IN_STOCK").code == ViolationCode.INVALID_ENUM_VALUE

    def test_non_string_is_invalid_type(self):
        assert OneOf("a").validate(1).code == ViolationCode.INVALID_TYPE


class TestNumericRange:
    def test_inclusive_bounds(self):
        validator = NumericRange(min_value=0, max_value=5)
        assert validator.validate(0).is_valid
        assert validator.validate(5).is_valid
        assert validator.validate(5.01).code == ViolationCode.OUT_OF_RANGE
        assert validator.validate(-0.01).code == ViolationCode.OUT_OF_RANGE

    def test_exclusive_minimum(self):
        validator = positive()
        assert validator.validate(0.001).is_valid
        result = validator.validate(0)
        assert result.code == ViolationCode.OUT_OF_RANGE
        assert result.expected == "> 0"

    def test_negative_message(self):
        result = non_negative(integer=True).validate(-1)
        assert result.code == ViolationCode.OUT_OF_RANGE
        assert "cannot be negative" in result.error_message
        assert result.actual == -1

    @pytest.mark.parametrize("value", [True, False])
    def test_booleans_are_not_numbers(self, value):
        assert NumericRange().validate(value).code == ViolationCode.INVALID_TYPE

    def test_numeric_string_is_invalid_type(self):
        assert NumericRange().validate("12").code == ViolationCode.INVALID_TYPE

    def test_integral_float_normalizes_to_int(self):
        result = non_negative(integer=True).validate(3.0)
        assert result.is_valid
        assert result.value == 3
        assert isinstance(result.value, int)

    def test_fractional_float_for_integer_is_invalid_type(self):
        assert non_negative(integer=True).validate(2.5).code == ViolationCode.INVALID_TYPE

    @pytest.mark.parametrize("value", [math.inf, -math.inf, math.nan])
    def test_non_finite_is_invalid_format(self, value):
        assert NumericRange().validate(value).code == ViolationCode.INVALID_FORMAT

    def test_decimal_accepted(self):
        result = NumericRange(min_value=0, max_value=1).validate(Decimal("0.5"))
        assert result.is_valid
        assert result.value == 0.5

    def test_huge_integer_does_not_overflow(self):
        assert non_negative(integer=True).validate(10**400).is_valid

    def test_huge_integer_for_real_is_invalid_format(self):
        result = positive().validate(10**400)
        assert result.code == ViolationCode.INVALID_FORMAT
        assert result.expected == "finite number"

    def test_large_integer_for_real_within_float_range(self):
        assert positive().validate(10**300).is_valid

    @given(st.floats(min_value=0, max_value=1, allow_nan=False))
    def test_unit_interval_accepts_all_members(self, value):
        assert NumericRange(min_value=0, max_value=1).validate(value).is_valid

    @given(st.integers(max_value=-1))
    def test_negative_integers_always_rejected(self, value):
        assert non_negative(integer=True).validate(value).code == ViolationCode.OUT_OF_RANGE


class TestBooleanValidator:
    def test_bool_passes(self):
        assert BooleanValidator().validate(False).is_valid

    @pytest.mark.parametrize("value", [0, 1, "true", None])
    def test_non_bool_is_invalid_type(self, value):
        assert BooleanValidator().validate(value).code == ViolationCode.INVALID_TYPE


class TestDateTimeValidator:
    def test_utc_datetime_parses_to_aware_datetime(self):
        result = DateTimeValidator().validate("2025-06-01T12:30:45Z")
        assert result.is_valid
        assert result.value == datetime(2025, 6, 1, 12, 30, 45, tzinfo=timezone.utc)

    def test_fraction_truncated_to_microseconds(self):
        result = DateTimeValidator().validate("2025-06-01T00:00:00.123456789Z")
        assert result.value.microsecond == 123456

    def test_short_fraction_is_padded(self):
        assert DateTimeValidator().validate("2025-06-01T00:00:00.5Z").value.microsecond == 500000

    def test_offset_rejected_by_default(self):
        result = DateTimeValidator().validate("2025-06-01T00:00:00+02:00")
        assert result.code == ViolationCode.INVALID_FORMAT

    def test_offset_accepted_when_allowed(self):
        result = DateTimeValidator(allow_offset=True).validate("2025-06-01T02:00:00+02:00")
        assert result.is_valid
        assert result.value.utcoffset() == timedelta(hours=2)
        assert result.value == datetime(2025, 6, 1, tzinfo=timezone.utc)

    @pytest.mark.parametrize("value", [
        "2025-06-01",
        "2025-06-01 00:00:00Z",
        "2025-06-01T00:00:00",
        "2025-13-01T00:00:00Z",
        "2025-02-30T00:00:00Z",
        "not a date",
    ])
    def test_malformed_is_invalid_format(self, value):
        assert DateTimeValidator().validate(value).code == ViolationCode.INVALID_FORMAT

    def test_non_string_is_invalid_type(self):
        assert DateTimeValidator().validate(1717200000).code == ViolationCode.INVALID_TYPE


class TestURLValidator:
    @pytest.mark.parametrize("value", [
        "https://example.com",
        "http://example.com/path?q=1",
        "https://sub.example.co.uk:8443/a/b#frag",
        "ftp://cdn.example.com/v.mp4",
        "mailto:ops@example.com",
        "urn:isbn:0451450523",
        "https://shop.example.com/a b",
        "https://user:pw@example.com/",
        "http://[::1]:8080/",
        "  https://example.com  ",
        "file:///tmp/feed.json",
    ])
    def test_valid_urls(self, value):
        result = URLValidator().validate(value)
        assert result.is_valid
        assert result.value == value

    @pytest.mark.parametrize("value", [
        "example.com",
        "/relative/path",
        "//cdn.example.com/a.jpg",
        "https://",
        "https://exa mple.com",
        "https://exa<mple.com/",
        "http://example.com:99999/",
        "http://example.com:80a/",
        "http://[::1/",
        "",
    ])
    def test_invalid_urls(self, value):
        assert URLValidator().validate(value).code == ViolationCode.INVALID_FORMAT

    def test_non_string_is_invalid_type(self):
        assert URLValidator().validate(42).code == ViolationCode.INVALID_TYPE

    def test_custom_schemes(self):
        validator = URLValidator(allowed_schemes=("ftp",))
        assert validator.validate("ftp://example.com").is_valid
        result = validator.validate("https://example.com")
        assert result.code == ViolationCode.INVALID_FORMAT
        assert result.actual == "https"


class TestDecimalString:
    @pytest.mark.parametrize("value", ["0", "12", "12.3", "12.34", "1000000.00"])
    def test_valid_amounts(self, value):
        result = DecimalString().validate(value)
        assert result.is_valid
        assert result.value == value

    @pytest.mark.parametrize("value", ["12.345", "-1", "1e3", "12.", ".5", " 12", "1,000", ""])
    def test_invalid_amounts(self, value):
        assert DecimalString().validate(value).code == ViolationCode.INVALID_FORMAT

    def test_number_is_invalid_type(self):
        assert DecimalString().validate(12.34).code == ViolationCode.INVALID_TYPE

    def test_non_ascii_digits_rejected(self):
        assert not DecimalString().validate("١٢").is_valid

    @given(st.integers(min_value=0, max_value=10**9), st.integers(min_value=0, max_value=99))
    def test_two_fraction_digits_always_accepted(self, whole, cents):
        assert DecimalString().validate(f"{whole}.{cents:02d}").is_valid


class TestCurrencyCode:
    def test_uppercase_code_passes(self):
        assert CurrencyCode().validate("EUR").is_valid

    @pytest.mark.parametrize("value", ["usd", "Usd", "US", "USDT", "U5D"])
    def test_non_canonical_is_invalid_format(self, value):
        assert CurrencyCode().validate(value).code == ViolationCode.INVALID_FORMAT


class TestAnd:
    def test_both_must_pass(self):
        validator = StringLength(max_length=3) & CurrencyCode()
        assert validator.validate("USD").is_valid
        assert validator.validate("usd").code == ViolationCode.INVALID_FORMAT

    def test_short_circuits_on_first_failure(self):
        validator = StringLength(max_length=3) & CurrencyCode()
        assert validator.validate("USDX").code == ViolationCode.OUT_OF_RANGE

    def test_right_sees_normalized_value(self):
        validator = non_negative(integer=True) & NumericRange(max_value=10, integer=True)
        result = validator.validate(4.0)
        assert result.value == 4
        assert isinstance(result.value, int)


class TestToViolation:
    def test_carries_context(self):
        violation = StringLength(max_length=1).validate("ab").to_violation(("title",))
        assert violation.path == "title"
        assert violation.code == ViolationCode.OUT_OF_RANGE
        assert violation.constraint == "max_length[1]"
