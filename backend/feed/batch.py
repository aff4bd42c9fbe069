"""Batch Feed Validation

Validates many records independently. Records never affect each other, so
the work is spread over worker threads; results are always reported by
input position, not completion order.

An unexpected exception while validating one record is captured as an
``E9001_UNEXPECTED_ERROR`` entry for that record and the batch carries on.
"""
from __future__ import annotations

import asyncio
from collections.abc import Mapping
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Sequence

from core.errors import AppError, Err, Ok, Result, from_exception
from core.logging import validation_logger
from .validator import FeedItemValidator, FeedValidationResult, get_default_validator

log = validation_logger()

DEFAULT_CONCURRENCY = 8


@dataclass(frozen=True, slots=True)
class BatchItemResult:
    """Result for a single record in a batch."""
    index: int
    input_key: str | None
    result: Result[FeedValidationResult, AppError]
    duration_ms: float

    @property
    def is_valid(self) -> bool:
        return self.result.is_ok() and self.result.unwrap().is_valid

    def to_dict(self) -> dict[str, Any]:
        entry: dict[str, Any] = {"index": self.index, "product_id": self.input_key}
        match self.result:
            case Ok(verdict):
                entry.update(verdict.to_dict())
            case Err(error):
                entry.update({"valid": False, **error.to_dict()})
        return entry


@dataclass(frozen=True, slots=True)
class BatchReport:
    """Ordered per-record results with summary counts."""
    results: tuple[BatchItemResult, ...]
    total_duration_ms: float

    @property
    def total_count(self) -> int:
        return len(self.results)

    @property
    def valid_count(self) -> int:
        return sum(1 for r in self.results if r.is_valid)

    @property
    def error_count(self) -> int:
        """Records that could not be validated at all (unexpected exceptions)."""
        return sum(1 for r in self.results if r.result.is_err())

    @property
    def invalid_count(self) -> int:
        return self.total_count - self.valid_count - self.error_count

    @property
    def all_valid(self) -> bool:
        return self.valid_count == self.total_count

    def verdicts(self) -> list[FeedValidationResult | None]:
        """Verdict per input position; None where validation itself failed."""
        return [r.result.unwrap_or(None) for r in self.results]

    def to_dict(self) -> dict[str, Any]:
        return {
            "total": self.total_count,
            "valid": self.valid_count,
            "invalid": self.invalid_count,
            "errors": self.error_count,
            "duration_ms": round(self.total_duration_ms, 3),
            "results": [r.to_dict() for r in self.results],
        }


def _input_key(raw: Any) -> str | None:
    if isinstance(raw, Mapping) and isinstance(key := raw.get("product_id"), str):
        return key
    return None


class BatchValidator:
    """Validate records concurrently, preserving input order.

    Usage:
        batch = BatchValidator(FeedItemValidator(), max_concurrent=8)
        report = await batch.execute(records)
        print(f"{report.valid_count}/{report.total_count} valid")
    """

    def __init__(
        self,
        validator: FeedItemValidator | None = None,
        max_concurrent: int = DEFAULT_CONCURRENCY,
    ):
        if max_concurrent < 1:
            raise ValueError(f"max_concurrent must be at least 1, got {max_concurrent}")
        self.validator = validator or get_default_validator()
        self.max_concurrent = max_concurrent

    def _validate_one(self, index: int, raw: Any) -> BatchItemResult:
        item_start = datetime.now(timezone.utc)
        try:
            result = Ok(self.validator.validate(raw))
        except Exception as e:
            log.exception("feed_item_validation_crashed", index=index, error_type=type(e).__name__)
            result = from_exception(
                e,
                message=str(e) or type(e).__name__,
                origin="feed.batch",
                index=index,
            )

        duration = (datetime.now(timezone.utc) - item_start).total_seconds() * 1000
        return BatchItemResult(
            index=index,
            input_key=_input_key(raw),
            result=result,
            duration_ms=duration,
        )

    def _report(self, results: Sequence[BatchItemResult], start: datetime) -> BatchReport:
        end = datetime.now(timezone.utc)
        report = BatchReport(
            results=tuple(results),
            total_duration_ms=(end - start).total_seconds() * 1000,
        )
        log.info(
            "feed_batch_validated",
            total=report.total_count,
            valid=report.valid_count,
            invalid=report.invalid_count,
            errors=report.error_count,
            duration_ms=round(report.total_duration_ms, 3),
        )
        return report

    async def execute(self, items: Sequence[Any]) -> BatchReport:
        """Validate on worker threads, at most ``max_concurrent`` at a time."""
        start = datetime.now(timezone.utc)
        semaphore = asyncio.Semaphore(self.max_concurrent)

        async def validate_with_semaphore(idx: int, raw: Any) -> BatchItemResult:
            async with semaphore:
                return await asyncio.to_thread(self._validate_one, idx, raw)

        tasks = [validate_with_semaphore(idx, raw) for idx, raw in enumerate(items)]
        results = await asyncio.gather(*tasks)
        return self._report(results, start)

    def execute_sync(self, items: Sequence[Any]) -> BatchReport:
        """Validate on a thread pool from synchronous code."""
        start = datetime.now(timezone.utc)
        if self.max_concurrent == 1:
            results = [self._validate_one(idx, raw) for idx, raw in enumerate(items)]
        else:
            with ThreadPoolExecutor(max_workers=self.max_concurrent) as pool:
                results = list(pool.map(self._validate_one, range(len(items)), items))
        return self._report(results, start)


# Helper functions

async def validate_batch(
    items: Sequence[Any],
    validator: FeedItemValidator | None = None,
    max_concurrent: int = DEFAULT_CONCURRENCY,
) -> BatchReport:
    """Convenience function for async batch validation.

    Usage:
        report = await validate_batch(records, max_concurrent=4)
    """
    return await BatchValidator(validator, max_concurrent).execute(items)


def validate_many(
    items: Sequence[Any],
    validator: FeedItemValidator | None = None,
    max_concurrent: int = DEFAULT_CONCURRENCY,
) -> BatchReport:
    """Synchronous counterpart of ``validate_batch``."""
    return BatchValidator(validator, max_concurrent).execute_sync(items)
