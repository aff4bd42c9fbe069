"""Typed Schema Base and Validation Configuration

Validated values are materialized as immutable Pydantic models so the rest
of the system works with typed attributes instead of raw dicts. The models
describe shape only; constraints live in the validator layer, which runs
first and reports every violation at once.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from pydantic import BaseModel as PydanticBaseModel, ConfigDict


@dataclass(frozen=True, slots=True)
class ValidationConfig:
    """Configuration for schema validation.

    enable_coercion: opt-in conversions before validation (numeric strings
        to numbers, currency codes to upper case). Off by default.
    allow_datetime_offset: accept ``+02:00`` style offsets in datetimes
        in addition to the ``Z`` suffix.
    """
    enable_coercion: bool = False
    allow_datetime_offset: bool = False


class BaseSchema(PydanticBaseModel):
    """Base schema for validated, immutable values."""

    model_config = ConfigDict(
        frozen=True,
        extra="forbid",
        populate_by_name=True,
        protected_namespaces=(),
    )

    def to_dict(self, *, exclude_none: bool = False, exclude_unset: bool = True) -> dict[str, Any]:
        """Serialize to a JSON-compatible dictionary.

        Unset optional fields are left out so the output has the same
        shape as the input record.
        """
        return self.model_dump(mode="json", exclude_none=exclude_none, exclude_unset=exclude_unset)

    @classmethod
    def json_schema(cls) -> dict[str, Any]: return cls.model_json_schema(mode="validation")
