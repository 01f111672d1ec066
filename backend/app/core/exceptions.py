"""
Global exception handlers for the FastAPI application.
Every error leaves the API in the same envelope shape the services return.
"""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
import logging

from app.core import messages
from app.schemas.common import ResponseEnvelope, validation_messages


logger = logging.getLogger(__name__)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """Handle HTTP exceptions (unknown routes, wrong methods)."""
    logger.warning(
        f"HTTP exception: {exc.detail}",
        extra={
            "status_code": exc.status_code,
            "path": request.url.path,
        },
    )

    envelope = ResponseEnvelope.error(exc.status_code, str(exc.detail))
    return JSONResponse(
        status_code=exc.status_code,
        content=envelope.to_content(),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Handle request validation errors as 400 with one message per field."""
    errors = validation_messages(exc.errors())

    logger.warning(
        "Validation error",
        extra={
            "path": request.url.path,
            "fields": [error.field for error in errors],
        },
    )

    envelope = ResponseEnvelope.from_messages(status.HTTP_400_BAD_REQUEST, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=envelope.to_content(),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions without exposing the cause."""
    logger.exception(
        f"Unhandled exception: {str(exc)}",
        extra={
            "path": request.url.path,
            "exception_type": type(exc).__name__,
        },
    )

    envelope = ResponseEnvelope.error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        messages.INTERNAL_SERVER_ERROR,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=envelope.to_content(),
    )


def setup_exception_handlers(app: FastAPI) -> None:
    """Register all exception handlers with the FastAPI app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)
