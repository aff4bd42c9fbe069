"""Typed Product Feed Models

Immutable Pydantic models for a validated feed record. They are built from
the normalized value only after the validator has accepted it, so they
carry shape and types, not constraints.
"""
from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from core.validation import BaseSchema

Availability = Literal["in_stock", "out_of_stock", "preorder", "backorder", "discontinued"]
Condition = Literal["new", "refurbished", "used"]
AgeGroup = Literal["newborn", "infant", "toddler", "kids", "adult"]
Gender = Literal["male", "female", "unisex"]
PickupMethod = Literal["buy_online_pickup_in_store", "curbside", "in_store"]
RelationshipType = Literal["often_bought_with", "similar_to", "accessories_for", "alternative_to"]
DimensionUnit = Literal["in", "cm", "m", "ft"]
WeightUnit = Literal["lb", "oz", "kg", "g"]
ShippingDimensionUnit = Literal["in", "cm"]


class Money(BaseSchema):
    amount: str
    currency: str

    @property
    def decimal_amount(self) -> Decimal:
        """The amount as an exact Decimal (the record keeps the source string)."""
        return Decimal(self.amount)


class Dimension(BaseSchema):
    value: float
    unit: DimensionUnit


class Weight(BaseSchema):
    value: float
    unit: WeightUnit


class ShippingDimensions(BaseSchema):
    length: float
    width: float
    height: float
    unit: ShippingDimensionUnit


class UnitMeasure(BaseSchema):
    value: float
    unit: str


class Variant(BaseSchema):
    variant_id: str
    attributes: Optional[dict[str, str]] = None
    price: Optional[Money] = None
    availability: Optional[Availability] = None
    inventory_quantity: Optional[int] = None
    sku: Optional[str] = None
    barcode: Optional[str] = None
    image_url: Optional[str] = None


class CustomAttribute(BaseSchema):
    name: str
    value: str


class GeoPrice(BaseSchema):
    region: str
    price: Money


class GeoAvailability(BaseSchema):
    region: str
    availability: Availability


class ProductFeedItem(BaseSchema):
    """A merchant catalog entry that passed validation."""

    # Flags
    enable_search: Optional[bool] = None
    enable_checkout: Optional[bool] = None

    # Required core
    product_id: str
    title: str
    description: str
    link: str
    price: Money
    availability: Availability
    inventory_quantity: int

    # Identification
    brand: Optional[str] = None
    mpn: Optional[str] = None
    gtin: Optional[str] = None
    sku: Optional[str] = None
    product_category: Optional[str] = None
    condition: Optional[Condition] = None

    # Physical
    material: Optional[str] = None
    pattern: Optional[str] = None
    color: Optional[str] = None
    size: Optional[str] = None
    age_group: Optional[AgeGroup] = None
    gender: Optional[Gender] = None
    dimensions: Optional[str] = None
    length: Optional[Dimension] = None
    width: Optional[Dimension] = None
    height: Optional[Dimension] = None
    weight: Optional[Weight] = None

    # Media
    image_url: Optional[str] = None
    additional_image_urls: Optional[list[str]] = None
    video_urls: Optional[list[str]] = None
    model_3d_url: Optional[str] = None

    # Pricing
    compare_at_price: Optional[Money] = None
    sale_price: Optional[Money] = None
    sale_price_effective_start: Optional[datetime] = None
    sale_price_effective_end: Optional[datetime] = None
    applicable_taxes_fees: Optional[Money] = None
    unit_pricing_measure: Optional[UnitMeasure] = None
    unit_pricing_base_measure: Optional[UnitMeasure] = None
    pricing_trend: Optional[str] = None

    # Availability window
    availability_date: Optional[datetime] = None
    expiration_date: Optional[datetime] = None
    pickup_method: Optional[PickupMethod] = None
    pickup_sla: Optional[str] = None

    # Variants
    variants: Optional[list[Variant]] = None
    item_group_id: Optional[str] = None
    item_group_title: Optional[str] = None

    # Fulfillment
    shipping_weight: Optional[Weight] = None
    shipping_dimensions: Optional[ShippingDimensions] = None
    shipping_label: Optional[str] = None
    ships_from_country: Optional[str] = None
    delivery_estimate: Optional[str] = None
    shipping_cost: Optional[Money] = None

    # Merchant
    merchant_id: Optional[str] = None
    merchant_name: Optional[str] = None
    merchant_url: Optional[str] = None
    merchant_privacy_policy_url: Optional[str] = None
    merchant_terms_of_service_url: Optional[str] = None

    # Returns
    return_policy_url: Optional[str] = None
    return_policy_days: Optional[int] = None

    # Performance
    click_through_rate: Optional[float] = None
    conversion_rate: Optional[float] = None
    average_rating: Optional[float] = None
    number_of_ratings: Optional[int] = None
    number_of_reviews: Optional[int] = None
    popularity_score: Optional[float] = None
    return_rate: Optional[float] = None

    # Compliance
    adult_only: Optional[bool] = None
    requires_prescription: Optional[bool] = None
    multipack: Optional[int] = None
    age_restriction: Optional[int] = None
    warning: Optional[str] = None

    # Classification
    product_type: Optional[str] = None
    google_product_category: Optional[str] = None

    # Custom
    custom_attributes: Optional[list[CustomAttribute]] = None

    # Related products
    related_product_ids: Optional[list[str]] = None
    relationship_type: Optional[RelationshipType] = None

    # Reviews
    product_review_count: Optional[int] = None
    product_review_rating: Optional[float] = None
    qa_content: Optional[str] = None

    # Geo
    included_destinations: Optional[list[str]] = None
    excluded_destinations: Optional[list[str]] = None
    geo_price: Optional[list[GeoPrice]] = None
    geo_availability: Optional[list[GeoAvailability]] = None
