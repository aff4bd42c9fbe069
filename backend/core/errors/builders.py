"""Error Builders

Ergonomic constructors for the typed errors raised at the service boundary.
"""
from .types import AppError, ErrorCode, ErrorContext, Err


def validation_error(
    message: str,
    *,
    code: ErrorCode = ErrorCode.E2000_VALIDATION_GENERIC,
    field: str | None = None,
    origin: str = "",
    **metadata,
) -> Err[AppError]:
    """Create validation error."""
    meta = {"field": field, **metadata}
    return Err(AppError(
        code=code,
        message=message,
        context=ErrorContext(origin=origin),
        metadata={k: v for k, v in meta.items() if v is not None},
    ))


def invalid_json(message: str, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Invalid JSON: {message}",
        code=ErrorCode.E2021_INVALID_JSON,
        origin=origin,
    )


def payload_too_large(count: int, limit: int, origin: str = "") -> Err[AppError]:
    return validation_error(
        f"Batch of {count} items exceeds the limit of {limit}",
        code=ErrorCode.E2020_PAYLOAD_TOO_LARGE,
        origin=origin,
        count=count,
        limit=limit,
    )