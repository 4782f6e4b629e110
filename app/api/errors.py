"""Translate service error tags and validation failures into HTTP responses."""

import logging

from fastapi import FastAPI, Request, status
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.services.errors import (
    EMAIL_IN_USE,
    INVALID_CREDENTIALS,
    INVALID_TOKEN,
    USER_NOT_FOUND,
    ServiceError,
)

logger = logging.getLogger(__name__)

STATUS_BY_CODE: dict[str, int] = {
    EMAIL_IN_USE: status.HTTP_409_CONFLICT,
    INVALID_CREDENTIALS: status.HTTP_401_UNAUTHORIZED,
    INVALID_TOKEN: status.HTTP_401_UNAUTHORIZED,
    USER_NOT_FOUND: status.HTTP_404_NOT_FOUND,
}

INTERNAL_ERROR_DETAIL = "Internal server error"


async def service_error_handler(request: Request, exc: ServiceError) -> JSONResponse:
    status_code = STATUS_BY_CODE.get(exc.code)
    if status_code is None:
        logger.error(
            "Unmapped service error",
            extra={"code": exc.code, "path": request.url.path},
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"detail": INTERNAL_ERROR_DETAIL},
        )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == 401 else None
    return JSONResponse(
        status_code=status_code,
        content={"detail": exc.message, "code": exc.code},
        headers=headers,
    )


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Input-shape errors are 400 with one entry per offending field."""
    issues = [
        {
            "loc": list(err.get("loc", ())),
            "msg": err.get("msg", ""),
            "type": err.get("type", ""),
        }
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=jsonable_encoder({"detail": "Invalid request", "issues": issues}),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"detail": INTERNAL_ERROR_DETAIL},
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(ServiceError, service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
