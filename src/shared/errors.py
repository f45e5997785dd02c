"""
Unified Error Handling for Voyager

Standard error response model and exception classes shared by the
routing core and the HTTP surface.

Usage:
    from shared.errors import register_exception_handlers, BadRequestError

    app = FastAPI()
    register_exception_handlers(app)

    if not valid:
        raise BadRequestError("Invalid command", detail="'query' is required")
"""
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

import structlog
from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

logger = structlog.get_logger("shared.errors")


class ErrorCode(str, Enum):
    """Standard error codes."""

    # Client errors (4xx)
    BAD_REQUEST = "BAD_REQUEST"

    # Server errors (5xx)
    SERVICE_UNAVAILABLE = "SERVICE_UNAVAILABLE"

    # Domain-specific errors
    LLM_ERROR = "LLM_ERROR"
    CONFIG_ERROR = "CONFIG_ERROR"
    PROVIDER_ERROR = "PROVIDER_ERROR"


class ErrorResponse(BaseModel):
    """
    Standard error response format.

    Example response:
    {
        "error": true,
        "code": "BAD_REQUEST",
        "message": "Invalid command",
        "detail": "'query' is required for localSearch",
        "timestamp": "2026-01-01T10:30:00Z"
    }
    """
    error: bool = True
    code: str
    message: str
    detail: Optional[str] = None
    timestamp: Optional[str] = None


class VoyagerException(Exception):
    """
    Base exception class for Voyager.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        status_code: int = 500,
        detail: Optional[str] = None
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.detail = detail
        super().__init__(message)


# ==============================================================================
# Client Errors (4xx)
# ==============================================================================

class BadRequestError(VoyagerException):
    """400 Bad Request - Invalid input or request format."""
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(ErrorCode.BAD_REQUEST, message, 400, detail)


# ==============================================================================
# Server Errors (5xx)
# ==============================================================================

class ServiceUnavailableError(VoyagerException):
    """503 Service Unavailable - Service temporarily unavailable."""
    def __init__(self, message: str, detail: Optional[str] = None):
        super().__init__(ErrorCode.SERVICE_UNAVAILABLE, message, 503, detail)


# ==============================================================================
# Domain-Specific Errors
# ==============================================================================

class LLMError(VoyagerException):
    """500 LLM Error - Remote interpretation failed."""
    def __init__(self, message: str, detail: Optional[str] = None, code: ErrorCode = ErrorCode.LLM_ERROR):
        super().__init__(code, message, 500, detail)


class ProviderError(VoyagerException):
    """502 Provider Error - Geocoding or search backend failed."""
    def __init__(self, provider: str, detail: Optional[str] = None):
        super().__init__(
            ErrorCode.PROVIDER_ERROR,
            f"Provider '{provider}' failed",
            502,
            detail
        )
        self.provider = provider


# ==============================================================================
# Exception Handlers
# ==============================================================================

def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


async def voyager_exception_handler(request: Request, exc: VoyagerException) -> JSONResponse:
    """
    FastAPI exception handler for VoyagerException and subclasses.

    Logs the error and returns a standardized ErrorResponse.
    """
    code = exc.code.value if isinstance(exc.code, ErrorCode) else exc.code

    logger.error(
        "voyager_exception",
        code=code,
        message=exc.message,
        status_code=exc.status_code,
        detail=exc.detail,
        path=str(request.url.path)
    )

    return JSONResponse(
        status_code=exc.status_code,
        content=ErrorResponse(
            code=code,
            message=exc.message,
            detail=exc.detail,
            timestamp=_timestamp()
        ).model_dump()
    )


def register_exception_handlers(app) -> None:
    """
    Register exception handlers with a FastAPI application.

    Usage:
        from shared.errors import register_exception_handlers

        app = FastAPI()
        register_exception_handlers(app)
    """
    app.add_exception_handler(VoyagerException, voyager_exception_handler)
    logger.info("voyager_exception_handlers_registered")
