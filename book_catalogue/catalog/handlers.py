"""Exception handlers turning catalogue errors into JSON responses."""

import logging
from typing import Dict, Type

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from .errors import (
    CatalogueError,
    Conflict,
    DuplicateTitle,
    NotFound,
    StorageFailure,
    ValidationError,
)


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)

STATUS_CODES: Dict[Type[CatalogueError], int] = {
    # Literal: the 422 constant was renamed across Starlette releases.
    ValidationError: 422,
    NotFound: status.HTTP_404_NOT_FOUND,
    DuplicateTitle: status.HTTP_409_CONFLICT,
    Conflict: status.HTTP_409_CONFLICT,
    StorageFailure: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_code_for(exc: CatalogueError) -> int:
    for cls in type(exc).__mro__:
        if cls in STATUS_CODES:
            return STATUS_CODES[cls]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def catalogue_error_handler(request: Request, exc: CatalogueError) -> JSONResponse:
    code = status_code_for(exc)
    if code >= 500:
        logger.error("[Server Error] %s %s: %s", request.method, request.url.path, exc.message)
    else:
        logger.warning("[Client Error] %s %s: %s", request.method, request.url.path, exc.message)
    return JSONResponse(status_code=code, content=exc.to_dict())


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Render malformed requests in the same shape as catalogue validation errors."""
    violations = []
    for error in exc.errors():
        loc = error.get("loc", ())
        # Drop the leading "body"/"query"/"path" part of the location.
        if len(loc) > 1:
            field = ".".join(str(x) for x in loc[1:])
        else:
            field = ".".join(str(x) for x in loc)
        violations.append((field, error.get("msg", "Invalid value")))
    return await catalogue_error_handler(request, ValidationError(violations))


async def unexpected_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("[Server Error] Unexpected error on %s %s", request.method, request.url.path)
    error = CatalogueError("An unexpected error occurred.")
    return JSONResponse(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, content=error.to_dict())


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(CatalogueError, catalogue_error_handler)  # type: ignore[arg-type]
    app.add_exception_handler(RequestValidationError, request_validation_handler)  # type: ignore[arg-type]
    app.add_exception_handler(Exception, unexpected_error_handler)
