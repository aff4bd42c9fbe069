"""
Tests for batch feed validation.
"""

import pytest

from core.errors import ErrorCode
from feed import BatchValidator, FeedItemValidator, Valid, validate_batch, validate_many


class ExplodingValidator(FeedItemValidator):
    """Raises for one product id to simulate an unexpected failure."""

    __slots__ = ()

    def validate(self, raw):
        if isinstance(raw, dict) and raw.get("product_id") == "SKU-boom":
            raise RuntimeError("boom")
        return super().validate(raw)


def summary(report) -> list:
    return [(r.index, r.input_key, r.result.unwrap().to_dict()) for r in report.results]


class TestValidateMany:
    def test_results_in_input_order(self, make_records):
        records = make_records(30)
        report = validate_many(records, max_concurrent=4)
        assert [r.index for r in report.results] == list(range(30))
        assert [r.input_key for r in report.results] == [f"SKU-{i}" for i in range(30)]

    def test_counts(self, make_records):
        report = validate_many(make_records(9))
        assert report.total_count == 9
        assert report.invalid_count == 3
        assert report.valid_count == 6
        assert report.error_count == 0
        assert not report.all_valid

    def test_empty_batch(self):
        report = validate_many([])
        assert report.total_count == 0
        assert report.all_valid

    def test_non_mapping_items_reported(self, minimal_record):
        report = validate_many([minimal_record, "garbage", None])
        assert [r.is_valid for r in report.results] == [True, False, False]
        assert report.results[1].input_key is None
        violation = report.results[1].result.unwrap().violations[0]
        assert violation.path == "$"

    def test_concurrent_matches_sequential(self, make_records):
        records = make_records(40)
        sequential = validate_many(records, max_concurrent=1)
        concurrent = validate_many(records, max_concurrent=8)
        assert summary(concurrent) == summary(sequential)

    def test_unexpected_exception_is_captured(self, make_records):
        records = make_records(3)
        records[1]["product_id"] = "SKU-boom"
        report = validate_many(records, validator=ExplodingValidator())
        assert report.error_count == 1
        error = report.results[1].result.unwrap_err()
        assert error.code == ErrorCode.E9001_UNEXPECTED_ERROR
        assert isinstance(error.cause, RuntimeError)
        assert report.results[0].is_valid
        assert report.verdicts()[1] is None
        assert isinstance(report.verdicts()[0], Valid)

    def test_invalid_concurrency(self):
        with pytest.raises(ValueError):
            BatchValidator(max_concurrent=0)


class TestValidateBatch:
    async def test_async_results_in_input_order(self, make_records):
        records = make_records(25)
        report = await validate_batch(records, max_concurrent=3)
        assert [r.index for r in report.results] == list(range(25))
        assert report.invalid_count == 8

    async def test_async_matches_sync(self, make_records):
        records = make_records(20)
        async_report = await validate_batch(records, max_concurrent=5)
        sync_report = validate_many(records, max_concurrent=1)
        assert summary(async_report) == summary(sync_report)

    async def test_async_captures_exceptions(self, make_records):
        records = make_records(3)
        records[0]["product_id"] = "SKU-boom"
        report = await validate_batch(records, validator=ExplodingValidator())
        assert report.results[0].result.is_err()
        assert report.results[1].result.is_ok()
        assert not report.results[1].is_valid
        assert report.results[2].is_valid
        assert (report.error_count, report.invalid_count, report.valid_count) == (1, 1, 1)


class TestBatchReport:
    def test_to_dict(self, make_records):
        records = make_records(3)
        records[2]["product_id"] = "SKU-boom"
        data = validate_many(records, validator=ExplodingValidator()).to_dict()
        assert (data["total"], data["valid"], data["invalid"], data["errors"]) == (3, 1, 1, 1)
        first, second, third = data["results"]
        assert first == {"index": 0, "product_id": "SKU-0", "valid": True, "item": records[0]}
        assert second["valid"] is False
        assert second["violations"][0]["path"] == "inventory_quantity"
        assert third["valid"] is False
        assert third["error"]["code"] == "E9001_UNEXPECTED_ERROR"
