"""
Exception handlers.

Maps the IdentaError hierarchy to HTTP status codes and renders every
failure in the standard response envelope.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shared.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    ExternalServiceError,
    IdentaError,
    NotFoundError,
    StorageError,
    ValidationError,
)
from shared.models import ApiResponse

logger = logging.getLogger(__name__)

# First match wins; subclasses must precede their bases.
STATUS_CODES: list[tuple[type[IdentaError], int]] = [
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (StorageError, status.HTTP_500_INTERNAL_SERVER_ERROR),
    (ExternalServiceError, status.HTTP_502_BAD_GATEWAY),
]


def status_code_for(error: IdentaError) -> int:
    for error_type, status_code in STATUS_CODES:
        if isinstance(error, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


def error_response(status_code: int, message: str, error_code: str, data: Optional[dict] = None) -> JSONResponse:
    envelope = ApiResponse(message=message, data=data or {}, error_code=error_code)
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return JSONResponse(status_code=status_code, content=envelope.model_dump(), headers=headers)


async def identa_error_handler(request: Request, exc: IdentaError) -> JSONResponse:
    status_code = status_code_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s (%s)", request.method, request.url.path, exc.code, exc.message)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, exc.code)
    return error_response(status_code, exc.message, exc.code, exc.details)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        {"field": ".".join(str(part) for part in error["loc"]), "message": error["msg"]}
        for error in exc.errors()
    ]
    return error_response(
        status.HTTP_400_BAD_REQUEST,
        "Request validation failed",
        "REQUEST_VALIDATION_ERROR",
        {"errors": errors},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(IdentaError, identa_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
