# app/api/errors.py
import traceback

from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from app.domain.exceptions import (
    ConflictError,
    DomainError,
    NotFoundError,
    ServiceUnavailableError,
    StorageError,
    ValidationError,
)
from app.utils.logging import get_logger
from app.utils.settings import DEBUG

logger = get_logger(__name__)

#kolejnosc ma znaczenie, podklasy przed klasami bazowymi
_STATUS_BY_ERROR = (
    (ValidationError, 400),
    (NotFoundError, 404),
    (ConflictError, 409),
    (ServiceUnavailableError, 503),
    (StorageError, 500),
)


def status_for(exc: DomainError) -> int:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return 500


def _body(code: str, message: str, exc: BaseException, **extra) -> dict:
    body = {"error": code, "message": message, **extra}
    #stack trace tylko w trybie diagnostycznym
    if DEBUG:
        body["stack"] = "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
    return body


async def domain_error_handler(request: Request, exc: DomainError) -> JSONResponse:
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")
    else:
        logger.info(f"{request.method} {request.url.path} -> {status_code}: {exc.message}")

    extra = {}
    if getattr(exc, "field", None):
        extra["field"] = exc.field
    return JSONResponse(status_code=status_code, content=_body(exc.code, exc.message, exc, **extra))


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info(f"{request.method} {request.url.path} -> 400: {exc.errors()}")
    return JSONResponse(
        status_code=400,
        content=_body(
            ValidationError.code,
            "Invalid request data",
            exc,
            details=jsonable_encoder(exc.errors()),
        ),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception(f"{request.method} {request.url.path} -> 500")
    return JSONResponse(status_code=500, content=_body("INTERNAL_ERROR", "Internal server error", exc))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(DomainError, domain_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
