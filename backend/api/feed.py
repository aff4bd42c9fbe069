"""Feed Validation API Routes

Validation outcomes are data: an invalid record is a 200 response with its
violations, unless the caller asks for invalid records to be rejected.
"""
from functools import lru_cache
from typing import Any

from fastapi import APIRouter, Body, Depends, Query
from pydantic import BaseModel

from core.config import settings
from core.errors import payload_too_large, raise_error, raise_result
from core.logging import api_logger
from core.validation import ValidationConfig
from feed import FeedItemValidator, ProductFeedItem, REQUIRED_FIELDS, validate_batch

log = api_logger()

router = APIRouter()


# === Request/Response Models ===

class BatchValidateRequest(BaseModel):
    items: list[Any]


class ViolationResponse(BaseModel):
    path: str
    code: str
    message: str
    constraint: str | None = None
    expected: Any = None
    actual: Any = None


class ValidateResponse(BaseModel):
    valid: bool
    item: dict[str, Any] | None = None
    violations: list[ViolationResponse] | None = None


class BatchItemResponse(ValidateResponse):
    index: int
    product_id: str | None = None
    error: dict[str, Any] | None = None


class BatchValidateResponse(BaseModel):
    total: int
    valid: int
    invalid: int
    errors: int
    duration_ms: float
    results: list[BatchItemResponse]


# === Dependencies ===

@lru_cache
def get_validator() -> FeedItemValidator:
    """Validator configured from settings."""
    return FeedItemValidator(ValidationConfig(
        enable_coercion=settings.FEED_COERCE,
        allow_datetime_offset=settings.FEED_DATETIME_ALLOW_OFFSET,
    ))


# === Routes ===

@router.post("/validate", response_model=ValidateResponse, response_model_exclude_none=True)
async def validate_item(
    payload: Any = Body(...),
    reject_invalid: bool = Query(False, description="Respond 400 when the record is invalid"),
    validator: FeedItemValidator = Depends(get_validator),
):
    """Validate a single feed record"""
    verdict = validator.validate(payload)

    if not verdict.is_valid:
        log.info("feed_item_rejected", violation_count=len(verdict.violations))
        if reject_invalid:
            raise_error(verdict.to_app_error().with_context(origin="api.feed.validate"))

    return verdict.to_dict()


@router.post("/validate/batch", response_model=BatchValidateResponse, response_model_exclude_none=True)
async def validate_items(
    request: BatchValidateRequest,
    validator: FeedItemValidator = Depends(get_validator),
):
    """Validate many feed records; results are in request order"""
    if len(request.items) > settings.FEED_MAX_BATCH_SIZE:
        raise_result(payload_too_large(
            len(request.items), settings.FEED_MAX_BATCH_SIZE, origin="api.feed.validate_batch",
        ))

    report = await validate_batch(
        request.items,
        validator=validator,
        max_concurrent=settings.FEED_BATCH_CONCURRENCY,
    )
    return report.to_dict()


@router.get("/schema")
async def get_schema():
    """JSON Schema of a valid feed record"""
    return {
        "required": list(REQUIRED_FIELDS),
        "schema": ProductFeedItem.json_schema(),
    }
