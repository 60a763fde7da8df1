from __future__ import annotations

from typing import TYPE_CHECKING

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel

if TYPE_CHECKING:
    import uuid
    from datetime import date


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

    @property
    def kind(self) -> str:
        """Error kind surfaced to callers; the class name minus the ``Error`` suffix."""
        name = type(self).__name__
        return name.removesuffix("Error") or name


class NotFoundError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_404_NOT_FOUND)


class ForbiddenError(AppError):
    def __init__(self, message: str) -> None:
        super().__init__(message, status_code=status.HTTP_403_FORBIDDEN)


class MissingContractDateError(AppError):
    def __init__(self, person_id: uuid.UUID) -> None:
        self.person_id = person_id
        super().__init__(
            f"Person {person_id} has no contract start date; accrual is undefined",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class MissingBirthDateError(AppError):
    def __init__(self, message: str = "A birth date is required to request a day-off") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class AlreadyUsedThisYearError(AppError):
    def __init__(self, message: str = "Day-off already used this year") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class OutsideWindowError(AppError):
    def __init__(self, message: str, window_start: date | None = None) -> None:
        self.window_start = window_start
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class DateRangeInvalidError(AppError):
    def __init__(self, message: str = "end_date must not be before start_date") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class OverlapConflictError(AppError):
    def __init__(self, conflicting_ids: list[uuid.UUID]) -> None:
        self.conflicting_ids = conflicting_ids
        refs = ", ".join(str(i) for i in conflicting_ids)
        super().__init__(
            f"Request overlaps with existing leave: {refs}",
            status_code=status.HTTP_409_CONFLICT,
        )


class CapacityBlockedError(AppError):
    def __init__(self, message: str = "New requests are blocked by an active medical leave") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class InvalidTransitionError(AppError):
    def __init__(self, from_status: str, action: str, reason: str | None = None) -> None:
        self.from_status = from_status
        self.action = action
        self.reason = reason
        msg = f"Cannot {action} a request in status {from_status}"
        if reason:
            msg += f": {reason}"
        super().__init__(msg, status_code=status.HTTP_409_CONFLICT)


class StaleStateError(AppError):
    def __init__(self, message: str = "Request was modified concurrently; reload and retry") -> None:
        super().__init__(message, status_code=status.HTTP_409_CONFLICT)


class JustificationRequiredError(AppError):
    def __init__(self, message: str = "A justification is required") -> None:
        super().__init__(message, status_code=status.HTTP_400_BAD_REQUEST)


class InsufficientBalanceError(AppError):
    def __init__(self, available: int, requested: int) -> None:
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient balance. Available: {available} days, requested: {requested} days",
            status_code=status.HTTP_400_BAD_REQUEST,
        )


class MissingActorError(RuntimeError):
    """A mutating operation was invoked without a resolved actor identity."""


async def _app_exception_handler(request: Request, exc: AppError) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            error=exc.kind,
            detail=exc.message,
            status_code=exc.status_code,
        ).model_dump(),
    )


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
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)  # type: ignore[arg-type]
