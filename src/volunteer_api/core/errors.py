"""
Error Taxonomy

Every expected failure is raised as a ServiceError tagged with an ErrorKind.
The request boundary maps the kind to an HTTP status through STATUS_BY_KIND,
a total mapping over the enum, so adding a kind without a status is caught by
the test suite rather than at runtime.

Response shape (FastAPI HTTPException convention):
    {"detail": {"error": "<CODE>", "message": "...", "errors": [{"field", "message"}]}}
"""

import enum
import logging
from dataclasses import asdict, dataclass

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

logger = logging.getLogger(__name__)

STORE_RETRY_AFTER_SECONDS = 5


class ErrorKind(str, enum.Enum):
    """Categories of failure surfaced to API clients."""

    VALIDATION_FAILED = "validation_failed"
    UNAUTHORIZED = "unauthorized"
    FORBIDDEN = "forbidden"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    RATE_LIMITED = "rate_limited"
    STORE_UNAVAILABLE = "store_unavailable"
    SERVER_FAULT = "server_fault"


STATUS_BY_KIND: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION_FAILED: status.HTTP_400_BAD_REQUEST,
    ErrorKind.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorKind.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorKind.RATE_LIMITED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorKind.STORE_UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
    ErrorKind.SERVER_FAULT: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


@dataclass(frozen=True)
class FieldError:
    """A single field-level validation message."""

    field: str
    message: str


class ServiceError(Exception):
    """Base exception for all expected service failures."""

    def __init__(
        self,
        kind: ErrorKind,
        message: str,
        error_code: str,
        errors: list[FieldError] | None = None,
        headers: dict[str, str] | None = None,
    ):
        self.kind = kind
        self.message = message
        self.error_code = error_code
        self.errors = errors or []
        self.headers = headers
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return STATUS_BY_KIND[self.kind]

    def to_detail(self) -> dict:
        detail: dict = {"error": self.error_code, "message": self.message}
        if self.errors:
            detail["errors"] = [asdict(error) for error in self.errors]
        return detail


class ValidationFailedError(ServiceError):
    """Raised when input is malformed; carries every field violation."""

    def __init__(self, errors: list[FieldError], message: str = "Validation failed"):
        super().__init__(
            kind=ErrorKind.VALIDATION_FAILED,
            message=message,
            error_code="VALIDATION_FAILED",
            errors=errors,
        )


class UnauthorizedError(ServiceError):
    """Raised for missing, invalid or expired credentials."""

    def __init__(self, message: str, error_code: str = "UNAUTHORIZED"):
        super().__init__(
            kind=ErrorKind.UNAUTHORIZED,
            message=message,
            error_code=error_code,
            headers={"WWW-Authenticate": "Bearer"},
        )


class StoreUnavailableError(ServiceError):
    """Raised when the database cannot be reached in time. Retryable."""

    def __init__(self):
        super().__init__(
            kind=ErrorKind.STORE_UNAVAILABLE,
            message="The service is temporarily unavailable. Please try again shortly.",
            error_code="STORE_UNAVAILABLE",
            headers={"Retry-After": str(STORE_RETRY_AFTER_SECONDS)},
        )


def field_errors_from_validation(exc: RequestValidationError) -> list[FieldError]:
    """
    Flatten pydantic/FastAPI validation errors into field/message pairs.

    The location prefix ("body", "query", "path") is dropped and nested
    locations are joined with dots, e.g. ``interests.1``.
    """
    field_errors = []
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ())]
        if loc and loc[0] in {"body", "query", "path", "header"}:
            loc = loc[1:]
        message = str(error.get("msg", "Invalid value"))
        # Messages raised from our own validators arrive prefixed
        message = message.removeprefix("Value error, ")
        field_errors.append(FieldError(field=".".join(loc) or "body", message=message))
    return field_errors


async def _service_error_handler(_request: Request, exc: ServiceError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"detail": exc.to_detail()},
        headers=exc.headers,
    )


async def _validation_error_handler(
    _request: Request, exc: RequestValidationError
) -> JSONResponse:
    error = ValidationFailedError(field_errors_from_validation(exc))
    return JSONResponse(status_code=error.status_code, content={"detail": error.to_detail()})


async def _database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    if isinstance(exc, (OperationalError, PoolTimeoutError)):
        logger.error(f"Database unavailable during {request.method} {request.url.path}: {exc!r}")
        error = StoreUnavailableError()
        return await _service_error_handler(request, error)

    logger.exception(f"Database error during {request.method} {request.url.path}")
    return _internal_error_response()


async def _unhandled_error_handler(request: Request, _exc: Exception) -> JSONResponse:
    logger.exception(f"Unhandled error during {request.method} {request.url.path}")
    return _internal_error_response()


def _internal_error_response() -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "detail": {
                "error": "INTERNAL_ERROR",
                "message": "An unexpected error occurred. Please try again later.",
            }
        },
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Install the application-wide exception handlers."""
    app.add_exception_handler(ServiceError, _service_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(SQLAlchemyError, _database_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


__all__ = [
    "ErrorKind",
    "STATUS_BY_KIND",
    "FieldError",
    "ServiceError",
    "ValidationFailedError",
    "UnauthorizedError",
    "StoreUnavailableError",
    "field_errors_from_validation",
    "register_exception_handlers",
]
