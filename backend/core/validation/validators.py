"""Compositional Field Validators

Leaf-level checks for untyped input. Every validator is a frozen dataclass,
pure and total: it never raises, it returns a ValidationResult that is
either valid (carrying the normalized value) or invalid (carrying a
violation code and context).

Features:
- Frozen dataclass validators for immutability
- Normalized values flow through AND chains
- Rich validation metadata for error context
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Decimal
from typing import Any, Sequence
import math
import re

from .errors import Path, Violation, ViolationCode

_ISO_DATETIME = re.compile(
    r"(?P<year>\d{4})-(?P<month>\d{2})-(?P<day>\d{2})"
    r"T(?P<hour>\d{2}):(?P<minute>\d{2}):(?P<second>\d{2})(?:\.(?P<fraction>\d+))?"
    r"(?P<tz>Z|[+-]\d{2}:\d{2})",
    re.ASCII,
)

_URL_SCHEME = re.compile(r"(?P<scheme>[A-Za-z][A-Za-z0-9+.\-]*):(?P<rest>.*)", re.DOTALL)
_URL_NOISE = re.compile(r"[\t\n\r]")
_URL_AUTHORITY_END = re.compile(r"[/?#\\]")
_C0_AND_SPACE = "".join(chr(c) for c in range(0x21))
_HOST_SCHEMES = frozenset({"http", "https", "ws", "wss", "ftp"})
_FORBIDDEN_HOST = re.compile(r"[\x00-\x20#/:<>?@\[\\\]^|\x7f]")
_IPV6_HOST = re.compile(r"\[[0-9A-Fa-f:.]+\]")


@dataclass(frozen=True, slots=True)
class ValidationResult:
    """Result of a validation check with rich context."""
    is_valid: bool
    value: Any = None
    error_message: str | None = None
    code: ViolationCode | None = None
    constraint: str | None = None
    expected: Any = None
    actual: Any = None

    @classmethod
    def valid(cls, value: Any = None) -> ValidationResult: return cls(is_valid=True, value=value)

    @classmethod
    def invalid(cls, message: str, code: ViolationCode = ViolationCode.INVALID_FORMAT, *,
                constraint: str | None = None, expected: Any = None, actual: Any = None) -> ValidationResult:
        return cls(is_valid=False, error_message=message, code=code, constraint=constraint,
            expected=expected, actual=actual)

    @classmethod
    def wrong_type(cls, expected: str, value: Any) -> ValidationResult:
        return cls.invalid(f"Expected {expected}, got {_type_name(value)}", ViolationCode.INVALID_TYPE,
            constraint=expected, expected=expected, actual=_type_name(value))

    def to_violation(self, loc: Path = ()) -> Violation:
        return Violation(loc=loc, code=self.code or ViolationCode.INVALID_FORMAT,
            message=self.error_message or "Validation failed", constraint=self.constraint,
            expected=self.expected, actual=self.actual)


def _type_name(value: Any) -> str:
    """JSON-flavoured type name for error messages."""
    if value is None: return "null"
    if isinstance(value, bool): return "boolean"
    if isinstance(value, (int, float, Decimal)): return "number"
    if isinstance(value, str): return "string"
    if isinstance(value, (list, tuple)): return "array"
    if isinstance(value, dict): return "object"
    return type(value).__name__


def _truncate(value: str, limit: int = 50) -> str:
    return value[:limit] + ("..." if len(value) > limit else "")


def _host_problem(rest: str) -> str | None:
    """Why the authority after ``scheme:`` is unusable, or None if it is fine."""
    authority = _URL_AUTHORITY_END.split(rest.lstrip("/\\"), maxsplit=1)[0]
    host_port = authority.rpartition("@")[2]

    if host_port.startswith("["):
        host, bracket, port = host_port.partition("]")
        host += bracket
        if not _IPV6_HOST.fullmatch(host) or (port and not port.startswith(":")):
            return "URL has a malformed IPv6 host"
        port = port[1:]
    else:
        host, _, port = host_port.partition(":")
        if not host:
            return "URL must include host"
        if _FORBIDDEN_HOST.search(host):
            return f"URL host '{_truncate(host)}' contains forbidden characters"

    if port and not (port.isascii() and port.isdigit() and int(port) <= 65535):
        return f"URL port '{_truncate(port)}' is invalid"
    return None


class AtomicValidator(ABC):
    """Base class for atomic validators.

    Validators are immutable and compose with ``&``: the right-hand
    validator sees the left-hand validator's normalized value and only
    runs when the left one passed.
    """

    @abstractmethod
    def validate(self, value: Any) -> ValidationResult:
        """Validate a value. Returns ValidationResult."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Human-readable constraint name for error messages."""

    def __call__(self, value: Any) -> ValidationResult: return self.validate(value)

    def __and__(self, other: AtomicValidator) -> And: return And(self, other)


# ============================================================================
# String Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class StringLength(AtomicValidator):
    """Validate a string, optionally bounding its length."""
    min_length: int | None = None
    max_length: int | None = None

    @property
    def constraint_name(self) -> str:
        if self.min_length is not None and self.min_length == self.max_length:
            return f"length[{self.min_length}]"
        if self.min_length is not None and self.max_length is not None:
            return f"length[{self.min_length},{self.max_length}]"
        if self.min_length is not None:
            return f"min_length[{self.min_length}]"
        if self.max_length is not None:
            return f"max_length[{self.max_length}]"
        return "string"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("string", value)

        length = len(value)

        if self.min_length is not None and length < self.min_length:
            return ValidationResult.invalid(
                f"String length {length} is less than minimum {self.min_length}",
                ViolationCode.OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f">= {self.min_length} characters",
                actual=f"{length} characters",
            )

        if self.max_length is not None and length > self.max_length:
            return ValidationResult.invalid(
                f"String length {length} exceeds maximum {self.max_length}",
                ViolationCode.OUT_OF_RANGE,
                constraint=self.constraint_name,
                expected=f"<= {self.max_length} characters",
                actual=f"{length} characters",
            )

        return ValidationResult.valid(value)


@dataclass(frozen=True, slots=True)
class RegexPattern(AtomicValidator):
    """Validate that the whole string matches a regex (ASCII classes)."""
    pattern: str
    description: str | None = None

    @property
    def constraint_name(self) -> str:
        return self.description or f"pattern[{self.pattern}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("string", value)

        if not re.fullmatch(self.pattern, value, re.ASCII):
            return ValidationResult.invalid(
                f"Value does not match pattern: {self.description or self.pattern}",
                ViolationCode.INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '{self.pattern}'",
                actual=_truncate(value),
            )

        return ValidationResult.valid(value)


@dataclass(frozen=True, slots=True)
class OneOf(AtomicValidator):
    """Validate value is one of allowed options (case-sensitive)."""
    options: tuple[str, ...]

    def __init__(self, *options: str):
        object.__setattr__(self, "options", tuple(options))

    @property
    def constraint_name(self) -> str:
        return f"one_of[{', '.join(self.options)}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("string", value)
        if value not in self.options:
            return ValidationResult.invalid(f"Value '{_truncate(value)}' is not one of: {', '.join(self.options)}",
                ViolationCode.INVALID_ENUM_VALUE, constraint=self.constraint_name,
                expected=list(self.options), actual=_truncate(value))
        return ValidationResult.valid(value)


# ============================================================================
# Numeric Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class NumericRange(AtomicValidator):
    """Validate a number against optional bounds.

    Booleans are not numbers. With ``integer=True`` integral floats such
    as ``3.0`` are accepted and normalized to ``int``.
    """
    min_value: float | int | None = None
    max_value: float | int | None = None
    exclusive_min: bool = False
    exclusive_max: bool = False
    integer: bool = False

    @property
    def constraint_name(self) -> str:
        parts = []
        if self.min_value is not None:
            op = ">" if self.exclusive_min else ">="
            parts.append(f"{op}{self.min_value}")
        if self.max_value is not None:
            op = "<" if self.exclusive_max else "<="
            parts.append(f"{op}{self.max_value}")
        kind = "integer" if self.integer else "range"
        return f"{kind}[{', '.join(parts)}]" if parts else kind

    def validate(self, value: Any) -> ValidationResult:
        if isinstance(value, bool) or not isinstance(value, (int, float, Decimal)):
            return ValidationResult.wrong_type("integer" if self.integer else "number", value)

        num = float(value) if isinstance(value, Decimal) else value
        if isinstance(num, float) and not math.isfinite(num):
            return ValidationResult.invalid(
                f"Value {num} is not a finite number",
                ViolationCode.INVALID_FORMAT,
                constraint=self.constraint_name,
                expected="finite number",
                actual=str(num),
            )

        if self.integer:
            if isinstance(num, float) and not num.is_integer():
                return ValidationResult.invalid(
                    f"Expected integer, got {num}",
                    ViolationCode.INVALID_TYPE,
                    constraint="integer",
                    expected="integer",
                    actual=num,
                )
            num = int(num)
        elif isinstance(num, int):
            try:
                float(num)
            except OverflowError:
                return ValidationResult.invalid(
                    "Value is too large to be represented as a number",
                    ViolationCode.INVALID_FORMAT,
                    constraint=self.constraint_name,
                    expected="finite number",
                    actual=f"{num.bit_length()}-bit integer",
                )

        if self.min_value is not None:
            if self.exclusive_min and num <= self.min_value:
                return ValidationResult.invalid(
                    f"Value {num} must be greater than {self.min_value}",
                    ViolationCode.OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"> {self.min_value}",
                    actual=num,
                )
            elif not self.exclusive_min and num < self.min_value:
                message = (f"Value {num} cannot be negative" if self.min_value == 0
                    else f"Value {num} must be at least {self.min_value}")
                return ValidationResult.invalid(
                    message,
                    ViolationCode.OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f">= {self.min_value}",
                    actual=num,
                )

        if self.max_value is not None:
            if self.exclusive_max and num >= self.max_value:
                return ValidationResult.invalid(
                    f"Value {num} must be less than {self.max_value}",
                    ViolationCode.OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"< {self.max_value}",
                    actual=num,
                )
            elif not self.exclusive_max and num > self.max_value:
                return ValidationResult.invalid(
                    f"Value {num} must be at most {self.max_value}",
                    ViolationCode.OUT_OF_RANGE,
                    constraint=self.constraint_name,
                    expected=f"<= {self.max_value}",
                    actual=num,
                )

        return ValidationResult.valid(num)


def positive(*, integer: bool = False) -> NumericRange:
    """Number strictly greater than zero."""
    return NumericRange(min_value=0, exclusive_min=True, integer=integer)


def non_negative(*, integer: bool = False) -> NumericRange:
    return NumericRange(min_value=0, integer=integer)


# ============================================================================
# Scalar Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class BooleanValidator(AtomicValidator):
    """Validate a JSON boolean."""

    @property
    def constraint_name(self) -> str:
        return "boolean"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, bool):
            return ValidationResult.wrong_type("boolean", value)
        return ValidationResult.valid(value)


# ============================================================================
# Format Validators
# ============================================================================

@dataclass(frozen=True, slots=True)
class DateTimeValidator(AtomicValidator):
    """Validate an ISO8601 datetime string and parse it to an aware datetime.

    Accepts ``YYYY-MM-DDTHH:MM:SS[.fraction]Z``. Numeric offsets such as
    ``+02:00`` are rejected unless ``allow_offset`` is set. Fractions
    beyond microsecond precision are truncated.
    """
    allow_offset: bool = False

    @property
    def constraint_name(self) -> str:
        return "datetime" + ("_offset" if self.allow_offset else "_utc")

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("datetime string", value)

        expected = "ISO8601 datetime (e.g. '2024-01-15T10:30:00Z')"
        if not (match := _ISO_DATETIME.fullmatch(value)):
            return ValidationResult.invalid(f"Invalid ISO8601 datetime: {_truncate(value)}",
                ViolationCode.INVALID_FORMAT, constraint=self.constraint_name,
                expected=expected, actual=_truncate(value))

        tz = match["tz"]
        if tz != "Z" and not self.allow_offset:
            return ValidationResult.invalid(f"Datetime must be in UTC ('Z' suffix), got offset {tz}",
                ViolationCode.INVALID_FORMAT, constraint=self.constraint_name,
                expected=expected, actual=value)

        try:
            tzinfo = timezone.utc if tz == "Z" else timezone(
                (1 if tz[0] == "+" else -1) * timedelta(hours=int(tz[1:3]), minutes=int(tz[4:6])))
            fraction = (match["fraction"] or "0")[:6].ljust(6, "0")
            parsed = datetime(int(match["year"]), int(match["month"]), int(match["day"]),
                int(match["hour"]), int(match["minute"]), int(match["second"]), int(fraction), tzinfo=tzinfo)
        except ValueError as e:
            return ValidationResult.invalid(f"Invalid ISO8601 datetime: {value} ({e})",
                ViolationCode.INVALID_FORMAT, constraint=self.constraint_name,
                expected=expected, actual=value)

        return ValidationResult.valid(parsed)


@dataclass(frozen=True, slots=True)
class URLValidator(AtomicValidator):
    """Validate an absolute URL the way a WHATWG URL parser accepts it.

    Any scheme is allowed (``mailto:``, ``ftp://``, ``urn:``); only the
    special schemes (http, https, ws, wss, ftp) require a well-formed host.
    Spaces inside the path are allowed, as a browser percent-encodes them.
    The string is kept as-is. ``allowed_schemes`` optionally narrows the
    accepted schemes.
    """
    allowed_schemes: frozenset[str] | None = None

    def __init__(self, allowed_schemes: Sequence[str] | None = None):
        schemes = frozenset(s.lower() for s in allowed_schemes) if allowed_schemes else None
        object.__setattr__(self, "allowed_schemes", schemes)

    @property
    def constraint_name(self) -> str:
        if self.allowed_schemes is None:
            return "url"
        return f"url[{', '.join(sorted(self.allowed_schemes))}]"

    def _invalid(self, message: str, expected: str, actual: str) -> ValidationResult:
        return ValidationResult.invalid(
            message,
            ViolationCode.INVALID_FORMAT,
            constraint=self.constraint_name,
            expected=expected,
            actual=_truncate(actual),
        )

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("string", value)

        text = _URL_NOISE.sub("", value.strip(_C0_AND_SPACE))
        match = _URL_SCHEME.match(text)
        if match is None:
            return self._invalid("URL must include scheme (e.g., https://)", "URL with scheme", value)

        scheme = match.group("scheme").lower()
        if self.allowed_schemes is not None and scheme not in self.allowed_schemes:
            return self._invalid(
                f"URL scheme '{scheme}' not allowed",
                f"scheme in {sorted(self.allowed_schemes)}",
                scheme,
            )

        if scheme in _HOST_SCHEMES:
            problem = _host_problem(match.group("rest"))
            if problem is not None:
                return self._invalid(problem, "URL with host", value)

        return ValidationResult.valid(value)


@dataclass(frozen=True, slots=True)
class DecimalString(AtomicValidator):
    """Validate a non-negative decimal amount written as a string.

    ``"12"`` and ``"12.34"`` pass; ``"12.345"``, ``"-1"``, ``"1e3"`` and
    numbers (as opposed to strings) do not. The string is kept as-is.
    """
    max_fraction_digits: int = 2

    @property
    def constraint_name(self) -> str:
        return f"decimal[{self.max_fraction_digits}]"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("decimal string", value)

        pattern = rf"\d+(\.\d{{1,{self.max_fraction_digits}}})?"
        if not re.fullmatch(pattern, value, re.ASCII):
            return ValidationResult.invalid(
                f"Must be a decimal string with at most {self.max_fraction_digits} fractional digits",
                ViolationCode.INVALID_FORMAT,
                constraint=self.constraint_name,
                expected=f"match pattern '^{pattern}$'",
                actual=_truncate(value),
            )

        return ValidationResult.valid(value)


@dataclass(frozen=True, slots=True)
class CurrencyCode(AtomicValidator):
    """Validate an ISO 4217 style currency code: exactly three uppercase letters."""

    @property
    def constraint_name(self) -> str:
        return "currency_code"

    def validate(self, value: Any) -> ValidationResult:
        if not isinstance(value, str):
            return ValidationResult.wrong_type("string", value)

        if not re.fullmatch(r"[A-Z]{3}", value, re.ASCII):
            return ValidationResult.invalid(
                "Must be ISO 4217 currency code (three uppercase letters)",
                ViolationCode.INVALID_FORMAT,
                constraint=self.constraint_name,
                expected="match pattern '^[A-Z]{3}$'",
                actual=_truncate(value),
            )

        return ValidationResult.valid(value)


# ============================================================================
# Combinators
# ============================================================================

@dataclass(frozen=True, slots=True)
class And(AtomicValidator):
    """AND combinator: both must pass, short-circuiting on the first failure."""
    left: AtomicValidator
    right: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return f"({self.left.constraint_name} AND {self.right.constraint_name})"

    def validate(self, value: Any) -> ValidationResult:
        if not (left_result := self.left.validate(value)).is_valid: return left_result
        return self.right.validate(left_result.value)
