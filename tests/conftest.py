"""
Pytest configuration and fixtures for feed validator tests.

Provides sample feed records, validators and an HTTP test client.
"""

import copy
import sys
from pathlib import Path

import pytest

# Ensure backend/ is on sys.path for local test runs without installation
_BACKEND = Path(__file__).resolve().parents[1] / "backend"
if _BACKEND.exists() and str(_BACKEND) not in sys.path:
    sys.path.insert(0, str(_BACKEND))

from core.validation import ValidationConfig  # noqa: E402
from feed import FeedItemValidator  # noqa: E402


MINIMAL_RECORD = {
    "product_id": "SKU-1001",
    "title": "Trail Running Shoe",
    "description": "Lightweight trail running shoe with a grippy outsole.",
    "link": "https://shop.example.com/products/sku-1001",
    "price": {"amount": "89.99", "currency": "USD"},
    "availability": "in_stock",
    "inventory_quantity": 42,
}


FULL_RECORD = {
    **MINIMAL_RECORD,
    "enable_search": True,
    "enable_checkout": False,
    "brand": "Summit",
    "mpn": "SM-TR-1001",
    "gtin": "00012345678905",
    "sku": "SKU-1001",
    "condition": "new",
    "product_category": "Apparel & Accessories > Shoes",
    "material": "mesh",
    "pattern": "solid",
    "color": "blue",
    "size": "10",
    "age_group": "adult",
    "gender": "unisex",
    "dimensions": "12 x 8 x 5 in",
    "length": {"value": 12.5, "unit": "in"},
    "width": {"value": 8, "unit": "in"},
    "height": {"value": 5, "unit": "in"},
    "weight": {"value": 1.4, "unit": "lb"},
    "image_url": "https://cdn.example.com/sku-1001.jpg",
    "additional_image_urls": [
        "https://cdn.example.com/sku-1001-side.jpg",
        "https://cdn.example.com/sku-1001-sole.jpg",
    ],
    "video_urls": ["https://cdn.example.com/sku-1001.mp4"],
    "model_3d_url": "https://cdn.example.com/sku-1001.glb",
    "compare_at_price": {"amount": "120.00", "currency": "USD"},
    "sale_price": {"amount": "79.99", "currency": "USD"},
    "sale_price_effective_start": "2025-05-01T00:00:00Z",
    "sale_price_effective_end": "2025-06-01T00:00:00Z",
    "applicable_taxes_fees": {"amount": "7.20", "currency": "USD"},
    "unit_pricing_measure": {"value": 1, "unit": "pair"},
    "unit_pricing_base_measure": {"value": 1, "unit": "pair"},
    "pricing_trend": "lowest in 90 days",
    "availability_date": "2025-04-15T09:00:00Z",
    "expiration_date": "2026-04-15T09:00:00Z",
    "pickup_method": "buy_online_pickup_in_store",
    "pickup_sla": "same day",
    "variants": [
        {
            "variant_id": "SKU-1001-9",
            "attributes": {"size": "9", "color": "blue"},
            "price": {"amount": "89.99", "currency": "USD"},
            "availability": "in_stock",
            "inventory_quantity": 10,
            "sku": "SKU-1001-9",
            "barcode": "0001234567890",
            "image_url": "https://cdn.example.com/sku-1001-9.jpg",
        },
        {"variant_id": "SKU-1001-10", "inventory_quantity": 0, "availability": "backorder"},
    ],
    "item_group_id": "TRAIL-1001",
    "item_group_title": "Trail Running Shoe",
    "shipping_weight": {"value": 2, "unit": "lb"},
    "shipping_dimensions": {"length": 14, "width": 9, "height": 6, "unit": "in"},
    "shipping_label": "standard",
    "ships_from_country": "US",
    "delivery_estimate": "2-5 business days",
    "shipping_cost": {"amount": "0", "currency": "USD"},
    "merchant_id": "M-77",
    "merchant_name": "Summit Outfitters",
    "merchant_url": "https://shop.example.com",
    "merchant_privacy_policy_url": "https://shop.example.com/privacy",
    "merchant_terms_of_service_url": "https://shop.example.com/terms",
    "return_policy_url": "https://shop.example.com/returns",
    "return_policy_days": 30,
    "click_through_rate": 0.042,
    "conversion_rate": 0.013,
    "average_rating": 4.6,
    "number_of_ratings": 312,
    "number_of_reviews": 128,
    "popularity_score": 3.9,
    "return_rate": 4.5,
    "adult_only": False,
    "requires_prescription": False,
    "multipack": 1,
    "age_restriction": 13,
    "warning": "Keep away from open flame.",
    "product_type": "Shoes > Running",
    "google_product_category": "187",
    "custom_attributes": [{"name": "drop", "value": "6mm"}, {"name": "drop", "value": "4mm"}],
    "related_product_ids": ["SKU-2001", "SKU-2002"],
    "relationship_type": "often_bought_with",
    "product_review_count": 128,
    "product_review_rating": 4.5,
    "qa_content": "Q: True to size? A: Yes.",
    "included_destinations": ["US", "CA"],
    "excluded_destinations": ["MX"],
    "geo_price": [{"region": "CA", "price": {"amount": "119.99", "currency": "CAD"}}],
    "geo_availability": [{"region": "CA", "availability": "preorder"}],
}


@pytest.fixture
def minimal_record() -> dict:
    """The seven required fields, all valid."""
    return copy.deepcopy(MINIMAL_RECORD)


@pytest.fixture
def full_record() -> dict:
    """A valid record with every optional field populated."""
    return copy.deepcopy(FULL_RECORD)


@pytest.fixture
def validator() -> FeedItemValidator:
    return FeedItemValidator()


@pytest.fixture
def coercing_validator() -> FeedItemValidator:
    return FeedItemValidator(ValidationConfig(enable_coercion=True))


@pytest.fixture
def client():
    """FastAPI test client for the feed validator app."""
    from fastapi.testclient import TestClient

    from main import app

    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def make_records():
    """Factory for a mixed feed: every third record has a negative inventory."""

    def _make(count: int) -> list[dict]:
        records = []
        for i in range(count):
            record = copy.deepcopy(MINIMAL_RECORD)
            record["product_id"] = f"SKU-{i}"
            if i % 3 == 1:
                record["inventory_quantity"] = -i
            records.append(record)
        return records

    return _make
