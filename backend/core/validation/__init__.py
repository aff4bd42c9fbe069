"""Declarative Validation System

Field validators, composite validators and a diagnostics collector for
checking untyped input (parsed JSON) in one pass. Validation never raises:
every result is data, either a normalized value or a list of
path-qualified violations.

Key Features:
- Pure, total field validators that return normalized values
- Composite validators for objects, arrays and mappings
- Fail-complete diagnostics with dotted/indexed paths
- Explicit opt-in coercion
- Immutable Pydantic models for validated output

Usage:
    from core.validation import (
        ObjectValidator, ArrayOf, required, optional,
        StringLength, NumericRange, CurrencyCode, DecimalString,
    )

    money = ObjectValidator(
        "money",
        required("amount", DecimalString()),
        required("currency", CurrencyCode()),
    )

    match money.validate({"amount": "12.345", "currency": "USD"}):
        case Ok(value):
            ...
        case Err(violations):
            for v in violations:
                print(v.path, v.code, v.message)
"""

from .schema import (
    BaseSchema,
    ValidationConfig,
)

from .validators import (
    ValidationResult,
    AtomicValidator,
    StringLength,
    RegexPattern,
    OneOf,
    NumericRange,
    positive,
    non_negative,
    BooleanValidator,
    DateTimeValidator,
    URLValidator,
    DecimalString,
    CurrencyCode,
    And,
)

from .composites import (
    Composite,
    CompositeResult,
    Validator,
    FieldSpec,
    ObjectValidator,
    ArrayOf,
    MappingOf,
    required,
    optional,
    run_validator,
)

from .errors import (
    ViolationCode,
    Violation,
    DiagnosticsCollector,
    format_path,
    violations_to_app_error,
)

from .coercion import (
    CoercionRule,
    StringToInt,
    StringToFloat,
    StringToUpper,
    Coerced,
)

__all__ = [
    # Schema
    "BaseSchema",
    "ValidationConfig",
    # Field validators
    "ValidationResult",
    "AtomicValidator",
    "StringLength",
    "RegexPattern",
    "OneOf",
    "NumericRange",
    "positive",
    "non_negative",
    "BooleanValidator",
    "DateTimeValidator",
    "URLValidator",
    "DecimalString",
    "CurrencyCode",
    "And",
    # Composites
    "Composite",
    "CompositeResult",
    "Validator",
    "FieldSpec",
    "ObjectValidator",
    "ArrayOf",
    "MappingOf",
    "required",
    "optional",
    "run_validator",
    # Diagnostics
    "ViolationCode",
    "Violation",
    "DiagnosticsCollector",
    "format_path",
    "violations_to_app_error",
    # Coercion
    "CoercionRule",
    "StringToInt",
    "StringToFloat",
    "StringToUpper",
    "Coerced",
]
