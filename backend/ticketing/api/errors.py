"""
Maps the error taxonomy onto HTTP responses.

Every rejection body is {"error": <code>, "detail": <message>} so clients can
tell which invariant failed without parsing text.
"""

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from ticketing.core.errors import (
    AdmissionTimeoutError,
    StoreError,
    TicketingError,
)
from ticketing.core.logging import get_logger
from ticketing.schemas.common import describe_errors

logger = get_logger(__name__)


def status_for(error: TicketingError) -> int:
    if isinstance(error, AdmissionTimeoutError):
        return status.HTTP_503_SERVICE_UNAVAILABLE
    if isinstance(error, StoreError):
        return status.HTTP_500_INTERNAL_SERVER_ERROR
    # Validation, unknown reference, not found and capacity are all the caller's problem
    return status.HTTP_400_BAD_REQUEST


def error_response(error: TicketingError) -> JSONResponse:
    return JSONResponse(
        status_code=status_for(error),
        content={"error": error.code.value, "detail": error.message},
    )


async def ticketing_error_handler(request: Request, exc: TicketingError) -> JSONResponse:
    if isinstance(exc, StoreError):
        logger.error("request_store_error", code=exc.code.value, error=exc.message)
    else:
        logger.info("request_rejected", code=exc.code.value, detail=exc.message)
    return error_response(exc)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    error = describe_errors(exc.errors())
    logger.info("request_rejected", code=error.code.value, detail=error.message)
    return error_response(error)


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(TicketingError, ticketing_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
