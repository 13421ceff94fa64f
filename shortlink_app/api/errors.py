"""
Mapping from core errors to HTTP responses.

Error body: {"error": <message>, "timestamp": "YYYY-MM-DD HH:MM:SS"}
"""

from datetime import datetime, timezone

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shortlink_app.logging_config import get_logger
from shortlink_app.services.exceptions import (
    ShortlinkError,
    InvalidInput,
    UniqueViolation,
    AllocationExhausted,
    StoreUnavailable,
    NotFound,
    Unauthorized,
    Cancelled,
)

logger = get_logger(__name__)

STATUS_BY_ERROR = {
    InvalidInput: status.HTTP_400_BAD_REQUEST,
    Unauthorized: status.HTTP_401_UNAUTHORIZED,
    NotFound: status.HTTP_404_NOT_FOUND,
    AllocationExhausted: status.HTTP_500_INTERNAL_SERVER_ERROR,
    StoreUnavailable: status.HTTP_500_INTERNAL_SERVER_ERROR,
    UniqueViolation: status.HTTP_500_INTERNAL_SERVER_ERROR,
    Cancelled: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def format_timestamp() -> str:
    """Current UTC time as ``YYYY-MM-DD HH:MM:SS``"""
    return datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S")


def status_for(exc: ShortlinkError) -> int:
    for error_type in type(exc).__mro__:
        if error_type in STATUS_BY_ERROR:
            return STATUS_BY_ERROR[error_type]
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def shortlink_error_handler(request: Request, exc: ShortlinkError) -> JSONResponse:
    """Exception handler registered on the app for every ShortlinkError"""
    status_code = status_for(exc)
    if status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc.message)
    else:
        logger.info("%s %s rejected (%d): %s", request.method, request.url.path, status_code, exc.message)

    return JSONResponse(
        status_code=status_code,
        content={"error": exc.message, "timestamp": format_timestamp()}
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Bodies FastAPI cannot parse (bad JSON, a list instead of an object) are a 400"""
    logger.info("%s %s rejected (400): %s", request.method, request.url.path, exc.errors())
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body", "timestamp": format_timestamp()}
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last resort for anything that escaped the core error types"""
    logger.exception("%s %s failed unexpectedly", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error", "timestamp": format_timestamp()}
    )
