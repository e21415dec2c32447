"""Translate domain exceptions into HTTP responses"""

import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from parish_hub.api.dependencies import get_request_id
from parish_hub.domain.exceptions import (
    ConflictError,
    DomainException,
    InvalidRequestError,
    NotFoundError,
    NotificationError,
)

STATUS_BY_EXCEPTION = {
    NotFoundError: 404,
    ConflictError: 409,
    InvalidRequestError: 422,
    NotificationError: 503,
}


async def domain_exception_handler(request: Request, exc: DomainException) -> JSONResponse:
    status_code = next(
        (code for exc_type, code in STATUS_BY_EXCEPTION.items() if isinstance(exc, exc_type)),
        400,
    )
    body = {"detail": str(exc)}
    if isinstance(exc, InvalidRequestError) and exc.field_errors:
        body["errors"] = exc.field_errors

    log = logging.warning if status_code < 500 else logging.error
    log(
        f"{type(exc).__name__}: {exc}",
        extra={"request_id": get_request_id(request), "path": request.url.path, "status": status_code},
    )
    return JSONResponse(status_code=status_code, content=body)


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logging.error(
        f"Unexpected error: {exc}",
        exc_info=exc,
        extra={"request_id": get_request_id(request), "path": request.url.path},
    )
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


def add_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainException, domain_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
