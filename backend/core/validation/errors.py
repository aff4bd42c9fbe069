"""Violations and the Diagnostics Collector

A violation is data, never an exception: a path into the record, a code
from a fixed taxonomy and a human-readable message. Composite validators
report violations relative to themselves; the collector prefixes them
with the parent path so context is never lost.

Violation Format:
{
    "path": "variants[1].inventory_quantity",
    "code": "OutOfRange",
    "message": "Value -1 cannot be negative",
    "constraint": "range[>=0]",
    "expected": ">= 0",
    "actual": -1
}
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable, Sequence

from core.errors import AppError, ErrorCode

PathSegment = str | int
Path = tuple[PathSegment, ...]


class ViolationCode(str, Enum):
    """Reasons a value can fail validation."""
    MISSING_REQUIRED_FIELD = "MissingRequiredField"
    INVALID_TYPE = "InvalidType"
    INVALID_FORMAT = "InvalidFormat"
    OUT_OF_RANGE = "OutOfRange"
    INVALID_ENUM_VALUE = "InvalidEnumValue"
    CROSS_FIELD_INCONSISTENCY = "CrossFieldInconsistency"

    @property
    def error_code(self) -> ErrorCode:
        return _ERROR_CODES[self]


_ERROR_CODES = {
    ViolationCode.MISSING_REQUIRED_FIELD: ErrorCode.E2001_REQUIRED_FIELD_MISSING,
    ViolationCode.INVALID_TYPE: ErrorCode.E2004_INVALID_TYPE,
    ViolationCode.INVALID_FORMAT: ErrorCode.E2002_INVALID_FORMAT,
    ViolationCode.OUT_OF_RANGE: ErrorCode.E2003_OUT_OF_RANGE,
    ViolationCode.INVALID_ENUM_VALUE: ErrorCode.E2005_CONSTRAINT_VIOLATION,
    ViolationCode.CROSS_FIELD_INCONSISTENCY: ErrorCode.E2006_CROSS_FIELD_INCONSISTENCY,
}


def format_path(loc: Sequence[PathSegment]) -> str:
    """Format a location tuple as a JSON path (e.g. ``variants[1].price.amount``)."""
    if not loc: return "$"
    parts = []
    for segment in loc:
        if isinstance(segment, int): parts.append(f"[{segment}]")
        elif parts: parts.append(f".{segment}")
        else: parts.append(str(segment))
    return "".join(parts)


@dataclass(frozen=True, slots=True)
class Violation:
    """A single path-qualified reason a value failed validation.

    - loc: location tuple; strings are object members, ints are array indices
    - code: taxonomy entry (see ViolationCode)
    - message: human-readable explanation
    - constraint: name of the violated constraint (e.g. "max_length[150]")
    - expected / actual: what the constraint wanted and what it got
    """
    loc: Path
    code: ViolationCode
    message: str
    constraint: str | None = None
    expected: Any = None
    actual: Any = None

    @property
    def path(self) -> str:
        return format_path(self.loc)

    def prefixed(self, prefix: Sequence[PathSegment]) -> Violation:
        """Return this violation relocated under ``prefix``."""
        if not prefix: return self
        return replace(self, loc=(*prefix, *self.loc))

    def to_dict(self) -> dict[str, Any]:
        """Serialize to dictionary for API responses and reports."""
        result: dict[str, Any] = {"path": self.path, "code": self.code.value, "message": self.message}
        if self.constraint: result["constraint"] = self.constraint
        if self.expected is not None: result["expected"] = self.expected
        if self.actual is not None: result["actual"] = self.actual
        return result

    @classmethod
    def from_pydantic_error(cls, error: dict[str, Any]) -> Violation:
        """Create from a Pydantic error dict (request body parsing at the HTTP edge)."""
        loc = tuple(seg for seg in error.get("loc", ()) if seg != "body")
        err_type = error.get("type", "")
        if err_type == "missing": code = ViolationCode.MISSING_REQUIRED_FIELD
        elif err_type.endswith("_type"): code = ViolationCode.INVALID_TYPE
        else: code = ViolationCode.INVALID_FORMAT
        return cls(loc=loc, code=code, message=error.get("msg", "Validation failed"), constraint=err_type or None)


class DiagnosticsCollector:
    """Accumulates violations from any nesting depth into one ordered report.

    Violations keep their insertion order. Callers add them in field
    declaration order and ascending array index, so the report reads the
    same way the schema does. Nothing is dropped: two violations on the
    same path are both kept.

    Usage:
        collector = DiagnosticsCollector()
        collector.add_error(("price", "amount"), ViolationCode.INVALID_FORMAT, "Not a decimal string")
        collector.extend(("variants",), element_violations)
        if collector.has_errors:
            report = collector.violations
    """

    __slots__ = ("_violations",)

    def __init__(self) -> None:
        self._violations: list[Violation] = []

    def add(self, violation: Violation) -> None:
        self._violations.append(violation)

    def add_error(self, loc: Sequence[PathSegment], code: ViolationCode, message: str, *,
                  constraint: str | None = None, expected: Any = None, actual: Any = None) -> None:
        """Record a violation at ``loc``."""
        self._violations.append(Violation(loc=tuple(loc), code=code, message=message,
            constraint=constraint, expected=expected, actual=actual))

    def extend(self, prefix: Sequence[PathSegment], violations: Iterable[Violation]) -> None:
        """Merge child violations, prefixing each with the parent path."""
        self._violations.extend(v.prefixed(prefix) for v in violations)

    @property
    def has_errors(self) -> bool: return bool(self._violations)

    @property
    def violations(self) -> list[Violation]: return self._violations.copy()

    def __len__(self) -> int: return len(self._violations)


def violations_to_app_error(violations: Sequence[Violation], message: str = "Validation failed") -> AppError:
    """Convert a violation report to an AppError for the error handling system."""
    if len(violations) == 1:
        v = violations[0]
        return AppError(code=v.code.error_code, message=f"{v.path}: {v.message}",
            metadata={"violations": [v.to_dict()]})
    return AppError(code=ErrorCode.E2000_VALIDATION_GENERIC, message=f"{message}: {len(violations)} violations",
        metadata={"error_count": len(violations), "violations": [v.to_dict() for v in violations]})
