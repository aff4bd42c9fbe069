"""Product Feed Record Validator

Orchestrates validation of one untyped record (parsed JSON):

1. Every declared field is dispatched to its validator; missing required
   fields are reported, absent optional fields are skipped.
2. Cross-field checks run against whatever parsed, whether or not step 1
   found problems. A check that references an unparsed field is skipped.
3. All violations are merged in declaration order. No violations means a
   typed ProductFeedItem; otherwise the complete, ordered report.

Validation is fail-complete, never fail-fast, and never raises for bad
input. The validator holds no mutable state and is safe to share across
threads.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Union

from pydantic import ValidationError

from core.errors import AppError
from core.logging import validation_logger
from core.validation import (
    DiagnosticsCollector,
    ValidationConfig,
    ValidationResult,
    Violation,
    ViolationCode,
    violations_to_app_error,
)
from .models import ProductFeedItem
from .schema import build_feed_item_schema

log = validation_logger()


@dataclass(frozen=True, slots=True)
class Valid:
    """A record that satisfied every constraint."""
    item: ProductFeedItem

    @property
    def is_valid(self) -> bool:
        return True

    @property
    def violations(self) -> tuple[Violation, ...]:
        return ()

    def to_dict(self) -> dict[str, Any]:
        return {"valid": True, "item": self.item.to_dict()}


@dataclass(frozen=True, slots=True)
class Invalid:
    """A record with at least one violation, in report order."""
    violations: tuple[Violation, ...]

    @property
    def is_valid(self) -> bool:
        return False

    def to_app_error(self) -> AppError:
        return violations_to_app_error(self.violations, "Feed item validation failed")

    def to_dict(self) -> dict[str, Any]:
        return {"valid": False, "violations": [v.to_dict() for v in self.violations]}


FeedValidationResult = Union[Valid, Invalid]

CrossFieldCheck = Callable[[Mapping[str, Any], DiagnosticsCollector], None]


# ============================================================================
# Cross-field checks
# ============================================================================

def check_sale_window(parsed: Mapping[str, Any], collector: DiagnosticsCollector) -> None:
    """The sale window must not end before it starts."""
    start = parsed.get("sale_price_effective_start")
    end = parsed.get("sale_price_effective_end")
    if start is None or end is None:
        return
    if start > end:
        collector.add_error(
            ("sale_price_effective_end",),
            ViolationCode.CROSS_FIELD_INCONSISTENCY,
            "sale_price_effective_end must not be before sale_price_effective_start",
            constraint="sale_price_effective_start <= sale_price_effective_end",
            expected=f">= {start.isoformat()}",
            actual=end.isoformat(),
        )


# No ordering between price, compare_at_price and sale_price is enforced.
CROSS_FIELD_CHECKS: tuple[CrossFieldCheck, ...] = (
    check_sale_window,
)


class FeedItemValidator:
    """Validate product feed records against the feed schema.

    Usage:
        validator = FeedItemValidator(ValidationConfig(enable_coercion=True))
        result = validator.validate(record)
        if result.is_valid:
            publish(result.item)
        else:
            for v in result.violations:
                print(v.path, v.code.value, v.message)
    """

    __slots__ = ("config", "schema", "checks")

    def __init__(
        self,
        config: ValidationConfig | None = None,
        checks: tuple[CrossFieldCheck, ...] = CROSS_FIELD_CHECKS,
    ):
        self.config = config or ValidationConfig()
        self.schema = build_feed_item_schema(self.config)
        self.checks = checks

    def validate(self, raw: Any) -> FeedValidationResult:
        """Validate one raw record. Never raises for malformed input."""
        if not isinstance(raw, Mapping):
            violation = ValidationResult.wrong_type("object", raw).to_violation()
            log.debug("feed_item_validated", product_id=None, violation_count=1)
            return Invalid((violation,))

        collector = DiagnosticsCollector()
        parsed = self.schema.parse_into(raw, collector)
        for check in self.checks:
            check(parsed, collector)

        product_id = parsed.get("product_id")
        log.debug("feed_item_validated", product_id=product_id, violation_count=len(collector))

        if collector.has_errors:
            return Invalid(tuple(collector.violations))

        try:
            item = ProductFeedItem.model_validate(parsed)
        except ValidationError as e:
            violations = tuple(Violation.from_pydantic_error(err) for err in e.errors())
            log.warning("feed_item_model_rejected", product_id=product_id, violation_count=len(violations))
            return Invalid(violations)
        return Valid(item)

    __call__ = validate


_default_validator: FeedItemValidator | None = None


def get_default_validator() -> FeedItemValidator:
    """Shared validator with the default configuration."""
    global _default_validator
    if _default_validator is None:
        _default_validator = FeedItemValidator()
    return _default_validator


def validate_feed_item(raw: Any, config: ValidationConfig | None = None) -> FeedValidationResult:
    """Validate one record with ``config`` (default configuration when omitted)."""
    validator = FeedItemValidator(config) if config is not None else get_default_validator()
    return validator.validate(raw)
