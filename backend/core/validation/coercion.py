"""Explicit Opt-in Coercion System

Coercion rules are explicit and opt-in, NEVER implicit. A rule only runs
when a schema is built with coercion enabled, and only converts values
that are unambiguous (``"12"`` to ``12``, ``"usd"`` to ``"USD"``). The
coerced value is then validated like any other input, so coercion never
hides a violation.
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Generic, TypeVar
import re

from core.errors import AppError, ErrorCode, Ok, Err, Result
from .validators import AtomicValidator, ValidationResult

T = TypeVar("T")

_INT_STRING = re.compile(r"[+-]?\d+", re.ASCII)
_FLOAT_STRING = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?", re.ASCII)


class CoercionRule(ABC, Generic[T]):
    """A conversion from raw JSON input to ``T``.

    ``can_coerce`` is a cheap feasibility check; ``coerce`` returns Err for
    anything it refuses, so callers never see an exception.
    """

    @abstractmethod
    def can_coerce(self, value: Any) -> bool:
        """Check if value can be coerced to target type."""

    @abstractmethod
    def coerce(self, value: Any) -> Result[T, AppError]:
        """Coerce value to target type. Returns Result."""

    def __call__(self, value: Any) -> Result[T, AppError]:
        return self.coerce(value)


def _cannot_coerce(value: Any, target: str) -> Err[AppError]:
    return Err(AppError(
        code=ErrorCode.E2004_INVALID_TYPE,
        message=f"Cannot coerce {value!r} to {target}",
        metadata={"target": target},
    ))


@dataclass(frozen=True, slots=True)
class StringToInt(CoercionRule[int]):
    """Coerce an integer literal string (``" 42 "``) to int."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and _INT_STRING.fullmatch(value.strip()) is not None

    def coerce(self, value: Any) -> Result[int, AppError]:
        if not self.can_coerce(value):
            return _cannot_coerce(value, "int")
        return Ok(int(value.strip()))


@dataclass(frozen=True, slots=True)
class StringToFloat(CoercionRule[float]):
    """Coerce a decimal literal string to float. ``"nan"`` and ``"inf"`` are not literals."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str) and _FLOAT_STRING.fullmatch(value.strip()) is not None

    def coerce(self, value: Any) -> Result[float, AppError]:
        if not self.can_coerce(value):
            return _cannot_coerce(value, "float")
        return Ok(float(value.strip()))


@dataclass(frozen=True, slots=True)
class StringToUpper(CoercionRule[str]):
    """Upper-case a string (currency codes)."""

    def can_coerce(self, value: Any) -> bool:
        return isinstance(value, str)

    def coerce(self, value: Any) -> Result[str, AppError]:
        if not isinstance(value, str):
            return _cannot_coerce(value, "upper-case string")
        return Ok(value.upper())


@dataclass(frozen=True, slots=True)
class Coerced(AtomicValidator):
    """Apply a coercion rule, then validate the result.

    Values the rule cannot coerce reach the validator unchanged and are
    reported exactly as they would be without coercion.

    Usage:
        validator = Coerced(StringToInt(), NumericRange(min_value=0, integer=True))
        validator.validate("7").value  # 7
    """
    rule: CoercionRule
    validator: AtomicValidator

    @property
    def constraint_name(self) -> str:
        return self.validator.constraint_name

    def validate(self, value: Any) -> ValidationResult:
        if self.rule.can_coerce(value) and (result := self.rule.coerce(value)).is_ok():
            value = result.unwrap()
        return self.validator.validate(value)
