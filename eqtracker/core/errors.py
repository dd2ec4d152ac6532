from __future__ import annotations

import logging
from typing import Any

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette import status
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger("eqtracker.errors")


class EquipmentTrackerError(Exception):
    """Base class for failures reported back to the caller unchanged."""

    code = "error"
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, message: str, *, details: Any | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details


class NotFoundError(EquipmentTrackerError):
    code = "not_found"
    status_code = status.HTTP_404_NOT_FOUND


class InvalidStateError(EquipmentTrackerError):
    code = "invalid_state"
    status_code = status.HTTP_409_CONFLICT


class AlreadyReturnedError(InvalidStateError):
    code = "already_returned"


class AuthorizationError(EquipmentTrackerError):
    code = "forbidden"
    status_code = status.HTTP_403_FORBIDDEN


class ConstraintViolationError(EquipmentTrackerError):
    code = "constraint_violation"
    status_code = status.HTTP_409_CONFLICT


class ErrorEnvelope(JSONResponse):
    def __init__(
        self,
        *,
        status_code: int,
        code: str,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        payload: dict[str, Any] = {"code": code, "message": message}
        if details is not None:
            payload["details"] = details
        super().__init__(payload, status_code=status_code, headers=headers)


async def tracker_error_handler(request: Request, exc: EquipmentTrackerError):
    logger.info(
        "request.rejected",
        extra={"extra_data": {"code": exc.code, "path": request.url.path, "reason": exc.message}},
    )
    return ErrorEnvelope(status_code=exc.status_code, code=exc.code, message=exc.message, details=exc.details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    detail = exc.detail
    message = detail if isinstance(detail, str) else "Error"
    details = detail if isinstance(detail, dict) else None
    return ErrorEnvelope(
        status_code=exc.status_code,
        code="http_error",
        message=message,
        details=details,
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message="Validation failed",
        details={"errors": jsonable_encoder(exc.errors())},
    )


async def value_error_handler(request: Request, exc: ValueError):
    return ErrorEnvelope(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        code="validation_error",
        message=str(exc),
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(EquipmentTrackerError, tracker_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(ValueError, value_error_handler)


__all__ = [
    "AlreadyReturnedError",
    "AuthorizationError",
    "ConstraintViolationError",
    "EquipmentTrackerError",
    "ErrorEnvelope",
    "InvalidStateError",
    "NotFoundError",
    "register_exception_handlers",
]
