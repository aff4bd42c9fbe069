"""Monadic Error Handling System

Result[T, E] containers for success/failure, AppError with a hierarchical
ErrorCode taxonomy, builders for common errors, and FastAPI handlers that
render them as structured JSON responses.

Usage:
    from core.errors import Ok, Err, Result, AppError, payload_too_large

    match outcome:
        case Ok(value):
            ...
        case Err(error):
            log.error(error.message, code=error.code.name)
"""
from .types import (
    Result,
    Ok,
    Err,
    AppError,
    ErrorCode,
    ErrorContext,
    from_exception,
)

from .builders import (
    validation_error,
    invalid_json,
    payload_too_large,
)

from .handlers import (
    AppErrorException,
    register_error_handlers,
    result_to_response,
    raise_error,
    raise_result,
)

__all__ = [
    "Result",
    "Ok",
    "Err",
    "AppError",
    "ErrorCode",
    "ErrorContext",
    "from_exception",
    "validation_error",
    "invalid_json",
    "payload_too_large",
    "AppErrorException",
    "register_error_handlers",
    "result_to_response",
    "raise_error",
    "raise_result",
]
