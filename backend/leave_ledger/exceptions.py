import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class ErrorResponse(BaseModel):
    """Standard error response schema."""

    error: str
    detail: str | None = None
    status_code: int


class AppError(Exception):
    """Base application exception."""

    def __init__(self, message: str, status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR) -> None:
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class NotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class InsufficientBalanceError(AppError):
    """Requested days exceed what the employee has left."""

    def __init__(self, requested: object, available: object) -> None:
        super().__init__(
            f"Insufficient vacation balance: {requested} day(s) requested, {available} available",
            status_code=status.HTTP_400_BAD_REQUEST,
        )
        self.requested = requested
        self.available = available


class InvalidStateTransitionError(AppError):
    """A decided request was asked to change status again."""

    def __init__(self, current_status: str, target_status: str) -> None:
        super().__init__(
            f"Cannot move a {current_status} request to {target_status}; only pending requests can be decided",
            status_code=status.HTTP_409_CONFLICT,
        )
        self.current_status = current_status
        self.target_status = target_status


class InvalidDateRangeError(AppError):
    def __init__(self, message: str = "end_date must be on or after start_date") -> None:
        super().__init__(message, status_code=status.HTTP_422_UNPROCESSABLE_ENTITY)


class ConcurrentLedgerUpdateError(AppError):
    """The employee ledger changed between read and conditional write."""

    def __init__(self, employee_id: object) -> None:
        super().__init__(
            f"Vacation ledger of employee {employee_id} was modified concurrently; retry the operation",
            status_code=status.HTTP_409_CONFLICT,
        )


class PersistenceFailureError(AppError):
    def __init__(self, message: str = "The data store rejected the operation") -> None:
        super().__init__(message, status_code=status.HTTP_503_SERVICE_UNAVAILABLE)


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=type(exc).__name__,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


async def _persistence_exception_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    logger.exception("Persistence failure on %s %s", request.method, request.url.path, exc_info=exc)
    return await _app_exception_handler(request, PersistenceFailureError())


async def _validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=ErrorResponse(
            error="ValidationError",
            detail=str(exc.errors()),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        ).model_dump(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register exception handlers on the application."""
    app.add_exception_handler(AppError, _app_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(SQLAlchemyError, _persistence_exception_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
