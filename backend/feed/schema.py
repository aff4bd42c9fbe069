"""Product Feed Schema

Declarative field table for a product feed record, built from the generic
validators in ``core.validation``. Members are declared in the order the
feed format lists them; that order is also the order violations are
reported in.

The table depends only on ``ValidationConfig`` and is cached per config,
so every validator sharing a config shares one immutable schema.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, get_args

from core.validation import (
    ArrayOf,
    AtomicValidator,
    BooleanValidator,
    Coerced,
    CurrencyCode,
    DateTimeValidator,
    DecimalString,
    MappingOf,
    NumericRange,
    ObjectValidator,
    OneOf,
    StringLength,
    StringToFloat,
    StringToInt,
    StringToUpper,
    URLValidator,
    ValidationConfig,
    non_negative,
    optional,
    positive,
    required,
)
from .models import (
    AgeGroup,
    Availability,
    Condition,
    DimensionUnit,
    Gender,
    PickupMethod,
    RelationshipType,
    ShippingDimensionUnit,
    WeightUnit,
)

REQUIRED_FIELDS = (
    "product_id",
    "title",
    "description",
    "link",
    "price",
    "availability",
    "inventory_quantity",
)

TITLE_MAX_LENGTH = 150
DESCRIPTION_MAX_LENGTH = 5000
MERCHANT_NAME_MAX_LENGTH = 70
COUNTRY_CODE_LENGTH = 2


def enum_of(alias: Any) -> OneOf:
    """OneOf validator for the values of a ``Literal`` alias."""
    return OneOf(*get_args(alias))


class FieldFactory:
    """Builds leaf validators for one ValidationConfig.

    Numeric and currency validators are wrapped with coercion rules only
    when the config enables coercion.
    """

    __slots__ = ("config",)

    def __init__(self, config: ValidationConfig):
        self.config = config

    def text(self, max_length: int | None = None, *, length: int | None = None) -> StringLength:
        if length is not None:
            return StringLength(min_length=length, max_length=length)
        return StringLength(max_length=max_length)

    def url(self) -> URLValidator:
        return URLValidator()

    def datetime(self) -> DateTimeValidator:
        return DateTimeValidator(allow_offset=self.config.allow_datetime_offset)

    def boolean(self) -> BooleanValidator:
        return BooleanValidator()

    def integer(self, validator: NumericRange) -> AtomicValidator:
        return Coerced(StringToInt(), validator) if self.config.enable_coercion else validator

    def real(self, validator: NumericRange) -> AtomicValidator:
        return Coerced(StringToFloat(), validator) if self.config.enable_coercion else validator

    def currency(self) -> AtomicValidator:
        validator = CurrencyCode()
        return Coerced(StringToUpper(), validator) if self.config.enable_coercion else validator

    def money(self) -> ObjectValidator:
        return ObjectValidator(
            "money",
            required("amount", DecimalString(max_fraction_digits=2)),
            required("currency", self.currency()),
        )

    def measure(self, unit: Any, name: str) -> ObjectValidator:
        """``{value: positive real, unit}``; ``unit`` is a Literal alias or ``str``."""
        unit_validator = StringLength() if unit is str else enum_of(unit)
        return ObjectValidator(
            name,
            required("value", self.real(positive())),
            required("unit", unit_validator),
        )

    def urls(self) -> ArrayOf:
        return ArrayOf(self.url())

    def strings(self) -> ArrayOf:
        return ArrayOf(self.text())


def _variant(f: FieldFactory) -> ObjectValidator:
    return ObjectValidator(
        "variant",
        required("variant_id", f.text()),
        optional("attributes", MappingOf(f.text())),
        optional("price", f.money()),
        optional("availability", enum_of(Availability)),
        optional("inventory_quantity", f.integer(non_negative(integer=True))),
        optional("sku", f.text()),
        optional("barcode", f.text()),
        optional("image_url", f.url()),
    )


def _shipping_dimensions(f: FieldFactory) -> ObjectValidator:
    return ObjectValidator(
        "shipping_dimensions",
        required("length", f.real(positive())),
        required("width", f.real(positive())),
        required("height", f.real(positive())),
        required("unit", enum_of(ShippingDimensionUnit)),
    )


def _custom_attribute(f: FieldFactory) -> ObjectValidator:
    return ObjectValidator(
        "custom_attribute",
        required("name", f.text()),
        required("value", f.text()),
    )


def _geo_price(f: FieldFactory) -> ObjectValidator:
    return ObjectValidator(
        "geo_price",
        required("region", f.text()),
        required("price", f.money()),
    )


def _geo_availability(f: FieldFactory) -> ObjectValidator:
    return ObjectValidator(
        "geo_availability",
        required("region", f.text()),
        required("availability", enum_of(Availability)),
    )


@lru_cache(maxsize=8)
def build_feed_item_schema(config: ValidationConfig = ValidationConfig()) -> ObjectValidator:
    """Build the product feed record schema for ``config``."""
    f = FieldFactory(config)
    rating = NumericRange(min_value=0, max_value=5)
    rate = NumericRange(min_value=0, max_value=1)
    count = non_negative(integer=True)

    return ObjectValidator(
        "product_feed_item",
        # Flags
        optional("enable_search", f.boolean()),
        optional("enable_checkout", f.boolean()),

        # Required core
        required("product_id", f.text()),
        required("title", f.text(TITLE_MAX_LENGTH)),
        required("description", f.text(DESCRIPTION_MAX_LENGTH)),
        required("link", f.url()),
        required("price", f.money()),
        required("availability", enum_of(Availability)),
        required("inventory_quantity", f.integer(count)),

        # Identification
        optional("brand", f.text()),
        optional("mpn", f.text()),
        optional("gtin", f.text()),
        optional("sku", f.text()),
        optional("condition", enum_of(Condition)),
        optional("product_category", f.text()),

        # Physical
        optional("material", f.text()),
        optional("pattern", f.text()),
        optional("color", f.text()),
        optional("size", f.text()),
        optional("age_group", enum_of(AgeGroup)),
        optional("gender", enum_of(Gender)),
        optional("dimensions", f.text()),
        optional("length", f.measure(DimensionUnit, "dimension")),
        optional("width", f.measure(DimensionUnit, "dimension")),
        optional("height", f.measure(DimensionUnit, "dimension")),
        optional("weight", f.measure(WeightUnit, "weight")),

        # Media
        optional("image_url", f.url()),
        optional("additional_image_urls", f.urls()),
        optional("video_urls", f.urls()),
        optional("model_3d_url", f.url()),

        # Pricing
        optional("compare_at_price", f.money()),
        optional("sale_price", f.money()),
        optional("sale_price_effective_start", f.datetime()),
        optional("sale_price_effective_end", f.datetime()),
        optional("applicable_taxes_fees", f.money()),
        optional("unit_pricing_measure", f.measure(str, "unit_measure")),
        optional("unit_pricing_base_measure", f.measure(str, "unit_measure")),
        optional("pricing_trend", f.text()),

        # Availability window
        optional("availability_date", f.datetime()),
        optional("expiration_date", f.datetime()),
        optional("pickup_method", enum_of(PickupMethod)),
        optional("pickup_sla", f.text()),

        # Variants
        optional("variants", ArrayOf(_variant(f))),
        optional("item_group_id", f.text()),
        optional("item_group_title", f.text()),

        # Fulfillment
        optional("shipping_weight", f.measure(WeightUnit, "weight")),
        optional("shipping_dimensions", _shipping_dimensions(f)),
        optional("shipping_label", f.text()),
        optional("ships_from_country", f.text(length=COUNTRY_CODE_LENGTH)),
        optional("delivery_estimate", f.text()),
        optional("shipping_cost", f.money()),

        # Merchant
        optional("merchant_id", f.text()),
        optional("merchant_name", f.text(MERCHANT_NAME_MAX_LENGTH)),
        optional("merchant_url", f.url()),
        optional("merchant_privacy_policy_url", f.url()),
        optional("merchant_terms_of_service_url", f.url()),

        # Returns
        optional("return_policy_url", f.url()),
        optional("return_policy_days", f.integer(positive(integer=True))),

        # Performance
        optional("click_through_rate", f.real(rate)),
        optional("conversion_rate", f.real(rate)),
        optional("average_rating", f.real(rating)),
        optional("number_of_ratings", f.integer(count)),
        optional("number_of_reviews", f.integer(count)),
        optional("popularity_score", f.real(rating)),
        optional("return_rate", f.real(NumericRange(min_value=0, max_value=100))),

        # Compliance
        optional("adult_only", f.boolean()),
        optional("requires_prescription", f.boolean()),
        optional("multipack", f.integer(positive(integer=True))),
        optional("age_restriction", f.integer(positive(integer=True))),
        optional("warning", f.text()),

        # Classification
        optional("product_type", f.text()),
        optional("google_product_category", f.text()),

        # Custom
        optional("custom_attributes", ArrayOf(_custom_attribute(f))),

        # Related products
        optional("related_product_ids", f.strings()),
        optional("relationship_type", enum_of(RelationshipType)),

        # Reviews
        optional("product_review_count", f.integer(count)),
        optional("product_review_rating", f.real(rating)),
        optional("qa_content", f.text()),

        # Geo
        optional("included_destinations", f.strings()),
        optional("excluded_destinations", f.strings()),
        optional("geo_price", ArrayOf(_geo_price(f))),
        optional("geo_availability", ArrayOf(_geo_availability(f))),
    )
