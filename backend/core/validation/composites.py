"""Composite Validators

Structured values built from field validators. A composite never stops at
the first bad member: every member is checked and every violation is
returned, with paths relative to the composite. Parents prefix them with
their own location.

    ObjectValidator   declared members, required or optional
    ArrayOf           every element, violations at [i]
    MappingOf         string keys, every value validated
"""
from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Union

from core.errors import Ok, Err, Result
from .errors import DiagnosticsCollector, Path, Violation, ViolationCode
from .validators import AtomicValidator, ValidationResult

CompositeResult = Result[Any, list[Violation]]


class Composite(ABC):
    """Base class for validators of nested structures."""

    @abstractmethod
    def validate(self, value: Any) -> CompositeResult:
        """Validate a value. Returns Ok(normalized) or Err(violations)."""

    @property
    @abstractmethod
    def constraint_name(self) -> str:
        """Human-readable constraint name for error messages."""


Validator = Union[AtomicValidator, Composite]


def run_validator(validator: Validator, value: Any) -> CompositeResult:
    """Run any validator with the composite contract."""
    if isinstance(validator, Composite):
        return validator.validate(value)
    result = validator.validate(value)
    if result.is_valid:
        return Ok(result.value)
    return Err([result.to_violation()])


@dataclass(frozen=True, slots=True)
class FieldSpec:
    """One declared member of an object."""
    name: str
    validator: Validator
    required: bool = False


def required(name: str, validator: Validator) -> FieldSpec:
    return FieldSpec(name, validator, required=True)


def optional(name: str, validator: Validator) -> FieldSpec:
    return FieldSpec(name, validator)


@dataclass(frozen=True, slots=True)
class ObjectValidator(Composite):
    """Validate a mapping against declared members.

    Members are checked in declaration order. Missing required members
    yield MissingRequiredField; absent optional members are skipped.
    Undeclared keys are ignored and dropped from the normalized value.
    """
    name: str
    fields: tuple[FieldSpec, ...]

    def __init__(self, name: str, *fields: FieldSpec):
        object.__setattr__(self, "name", name)
        object.__setattr__(self, "fields", tuple(fields))

    @property
    def constraint_name(self) -> str:
        return self.name

    @property
    def required_fields(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields if spec.required)

    @property
    def field_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.fields)

    def validate(self, value: Any) -> CompositeResult:
        if not isinstance(value, Mapping):
            return Err([ValidationResult.wrong_type("object", value).to_violation()])
        collector = DiagnosticsCollector()
        normalized = self.parse_into(value, collector)
        if collector.has_errors:
            return Err(collector.violations)
        return Ok(normalized)

    def parse_into(self, value: Mapping[str, Any], collector: DiagnosticsCollector,
                   prefix: Path = ()) -> dict[str, Any]:
        """Validate members into ``collector`` and return those that parsed.

        The returned dict holds only members whose validation succeeded,
        so callers can run further checks against partial results.
        """
        normalized: dict[str, Any] = {}
        for spec in self.fields:
            loc = (*prefix, spec.name)
            if spec.name not in value:
                if spec.required:
                    collector.add_error(loc, ViolationCode.MISSING_REQUIRED_FIELD,
                        f"Required field '{spec.name}' is missing", constraint="required")
                continue
            match run_validator(spec.validator, value[spec.name]):
                case Ok(parsed):
                    normalized[spec.name] = parsed
                case Err(violations):
                    collector.extend(loc, violations)
        return normalized


@dataclass(frozen=True, slots=True)
class ArrayOf(Composite):
    """Validate every element of an array independently."""
    element: Validator

    @property
    def constraint_name(self) -> str:
        return f"array[{self.element.constraint_name}]"

    def validate(self, value: Any) -> CompositeResult:
        if not isinstance(value, (list, tuple)):
            return Err([ValidationResult.wrong_type("array", value).to_violation()])
        collector = DiagnosticsCollector()
        normalized: list[Any] = []
        for index, item in enumerate(value):
            match run_validator(self.element, item):
                case Ok(parsed):
                    normalized.append(parsed)
                case Err(violations):
                    collector.extend((index,), violations)
        if collector.has_errors:
            return Err(collector.violations)
        return Ok(normalized)


@dataclass(frozen=True, slots=True)
class MappingOf(Composite):
    """Validate a string-keyed mapping, checking every value."""
    value_validator: Validator

    @property
    def constraint_name(self) -> str:
        return f"mapping[{self.value_validator.constraint_name}]"

    def validate(self, value: Any) -> CompositeResult:
        if not isinstance(value, Mapping):
            return Err([ValidationResult.wrong_type("object", value).to_violation()])
        collector = DiagnosticsCollector()
        normalized: dict[str, Any] = {}
        for key, item in value.items():
            if not isinstance(key, str):
                collector.add_error((str(key),), ViolationCode.INVALID_TYPE,
                    f"Expected string key, got {type(key).__name__}", constraint="string", expected="string")
                continue
            match run_validator(self.value_validator, item):
                case Ok(parsed):
                    normalized[key] = parsed
                case Err(violations):
                    collector.extend((key,), violations)
        if collector.has_errors:
            return Err(collector.violations)
        return Ok(normalized)
