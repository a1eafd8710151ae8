"""Exception handlers for converting custom exceptions to HTTP responses."""

from fastapi import Request, status
from fastapi.responses import JSONResponse

from backend.app.core.exceptions import (
    CallReportException,
    InputNotFoundError,
    GeneratorUnavailableError,
    UnparsableOutputError,
    SchemaViolationError,
    GenerationInProgressError,
    InvalidTransitionError,
    ReportNotFoundError,
)


async def callreport_exception_handler(request: Request, exc: CallReportException) -> JSONResponse:
    """
    Handle all call report exceptions and convert to appropriate HTTP responses.

    Args:
        request: The incoming request
        exc: The exception that was raised

    Returns:
        JSONResponse with appropriate status code and error details
    """
    # Map exception types to HTTP status codes
    if isinstance(exc, (InputNotFoundError, ReportNotFoundError)):
        status_code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (GenerationInProgressError, InvalidTransitionError)):
        status_code = status.HTTP_409_CONFLICT
    elif isinstance(exc, (GeneratorUnavailableError, UnparsableOutputError)):
        status_code = status.HTTP_502_BAD_GATEWAY
    elif isinstance(exc, SchemaViolationError):
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR
    else:
        # Generic CallReportException
        status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    return JSONResponse(
        status_code=status_code,
        content={
            "detail": exc.message,
            "type": exc.__class__.__name__,
            **({"info": exc.details} if exc.details else {})
        }
    )


def register_exception_handlers(app):
    """
    Register all custom exception handlers with the FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(CallReportException, callreport_exception_handler)
