"""Product Feed Validation

Validation and normalization of merchant product feed records.

Usage:
    from feed import FeedItemValidator, validate_many

    result = FeedItemValidator().validate(record)
    report = validate_many(records)
"""
from .models import (
    Availability,
    Condition,
    AgeGroup,
    Gender,
    PickupMethod,
    RelationshipType,
    Money,
    Dimension,
    Weight,
    ShippingDimensions,
    UnitMeasure,
    Variant,
    CustomAttribute,
    GeoPrice,
    GeoAvailability,
    ProductFeedItem,
)

from .schema import (
    REQUIRED_FIELDS,
    build_feed_item_schema,
)

from .validator import (
    Valid,
    Invalid,
    FeedValidationResult,
    FeedItemValidator,
    CROSS_FIELD_CHECKS,
    check_sale_window,
    get_default_validator,
    validate_feed_item,
)

from .batch import (
    BatchItemResult,
    BatchReport,
    BatchValidator,
    validate_batch,
    validate_many,
)

__all__ = [
    # Models
    "Availability",
    "Condition",
    "AgeGroup",
    "Gender",
    "PickupMethod",
    "RelationshipType",
    "Money",
    "Dimension",
    "Weight",
    "ShippingDimensions",
    "UnitMeasure",
    "Variant",
    "CustomAttribute",
    "GeoPrice",
    "GeoAvailability",
    "ProductFeedItem",
    # Schema
    "REQUIRED_FIELDS",
    "build_feed_item_schema",
    # Validation
    "Valid",
    "Invalid",
    "FeedValidationResult",
    "FeedItemValidator",
    "CROSS_FIELD_CHECKS",
    "check_sale_window",
    "get_default_validator",
    "validate_feed_item",
    # Batch
    "BatchItemResult",
    "BatchReport",
    "BatchValidator",
    "validate_batch",
    "validate_many",
]
