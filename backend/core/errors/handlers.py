"""FastAPI Exception Handlers

Integrates the monadic error handling system with FastAPI's exception
handling. Converts AppErrors, request body validation errors and
unexpected exceptions to structured HTTP responses.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

from core.logging import get_logger

from .types import AppError, ErrorCode, ErrorContext

log = get_logger("errors.handlers")


class AppErrorException(Exception):
    """Exception wrapper for AppError.

    Use this when you need to raise an AppError in code that
    doesn't use the Result monad (e.g., FastAPI route handlers).
    """

    def __init__(self, error: AppError):
        self.error = error
        super().__init__(str(error))


def result_to_response(error: AppError) -> JSONResponse:
    """Convert AppError to FastAPI JSONResponse."""
    status_code = error.code.http_status

    log_method = log.warning if status_code < 500 else log.error
    log_method(
        "error_response",
        error_code=error.code.name,
        error_code_num=error.code.value,
        message=error.message,
        category=error.code.category,
        correlation_id=error.context.correlation_id,
        origin=error.context.origin,
    )

    return JSONResponse(status_code=status_code, content=error.to_dict())


async def app_error_handler(request: Request, exc: AppErrorException) -> JSONResponse:
    """Handle AppErrorException raised in route handlers."""
    error = exc.error.with_context(
        request_id=request.headers.get("X-Request-ID"),
        correlation_id=request.headers.get("X-Correlation-ID") or exc.error.context.correlation_id,
    )
    return result_to_response(error)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle standard HTTP exceptions with structured error response."""
    status_code = exc.status_code
    code = ErrorCode.E2000_VALIDATION_GENERIC if 400 <= status_code < 500 else ErrorCode.E9001_UNEXPECTED_ERROR

    error = AppError(
        code=code,
        message=str(exc.detail) if exc.detail else f"HTTP {status_code}",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID") or ErrorContext().correlation_id,
            origin="http",
        ),
        metadata={"status": status_code},
    )
    response = result_to_response(error)
    response.status_code = status_code
    return response


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request body parsing errors with path-qualified violations."""
    from core.validation.errors import Violation

    violations = [Violation.from_pydantic_error(err) for err in exc.errors()]
    code = ErrorCode.E2021_INVALID_JSON if any(
        err.get("type") == "json_invalid" for err in exc.errors()
    ) else ErrorCode.E2000_VALIDATION_GENERIC

    error = AppError(
        code=code,
        message="Request validation failed",
        context=ErrorContext(origin="request_validation"),
        metadata={"violations": [v.to_dict() for v in violations]},
    ).with_context(
        correlation_id=request.headers.get("X-Correlation-ID", ""),
        request_id=request.headers.get("X-Request-ID", ""),
    )
    return result_to_response(error)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Catch-all handler for unhandled exceptions.

    Converts to internal error and logs full traceback.
    """
    error = AppError(
        code=ErrorCode.E9001_UNEXPECTED_ERROR,
        message="An unexpected error occurred",
        context=ErrorContext(
            correlation_id=request.headers.get("X-Correlation-ID") or ErrorContext().correlation_id,
            origin="unhandled",
        ),
        cause=exc,
    )

    log.exception(
        "unhandled_exception",
        error_type=type(exc).__name__,
        error_message=str(exc),
        correlation_id=error.context.correlation_id,
    )

    return result_to_response(error)


def register_error_handlers(app: FastAPI) -> None:
    """Register all error handlers on FastAPI app."""
    app.add_exception_handler(AppErrorException, app_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


def raise_error(error: AppError) -> None:
    """Raise AppError as exception.

    Use when you need to exit early from code that doesn't
    use the Result monad.
    """
    raise AppErrorException(error)


def raise_result(result) -> None:
    """Raise error if Result is Err, otherwise return."""
    if result.is_err():
        raise AppErrorException(result.unwrap_err())
