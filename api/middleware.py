"""
Consolidated middleware for the MealCheckin API
"""

import time
import logging
from decimal import Decimal
from uuid import uuid4

from fastapi import Request, status
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

from app.exceptions import ServiceError, StoreUnavailableError

logger = logging.getLogger("mealcheckin.middleware")

INVALID_PAYLOAD_MESSAGE = "Invalid request payload"
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred"


# ============================================================================
# Helper Functions
# ============================================================================


def make_serializable(obj):
    """Convert objects to JSON-serializable format"""
    if isinstance(obj, Decimal):
        return float(obj)
    elif isinstance(obj, bytes):
        return obj.decode("utf-8", errors="replace")
    elif isinstance(obj, dict):
        return {k: make_serializable(v) for k, v in obj.items()}
    elif isinstance(obj, (list, tuple)):
        return [make_serializable(item) for item in obj]
    return obj


def message_response(status_code: int, message: str) -> JSONResponse:
    """Error body shared by every endpoint: ``{"message": ...}``"""
    return JSONResponse(status_code=status_code, content={"message": message})


# ============================================================================
# Request Logging Middleware
# ============================================================================


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware to log all HTTP requests and responses"""

    async def dispatch(self, request: Request, call_next):
        # Generate unique request ID
        request_id = str(uuid4())
        request.state.request_id = request_id

        logger.info(
            "Request started",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "client": request.client.host if request.client else None,
            },
        )

        start_time = time.time()

        try:
            response: Response = await call_next(request)
            process_time = time.time() - start_time

            logger.info(
                "Request completed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "status_code": response.status_code,
                    "process_time": f"{process_time:.4f}s",
                },
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"

            return response

        except Exception as exc:
            process_time = time.time() - start_time
            logger.error(
                "Request failed",
                extra={
                    "request_id": request_id,
                    "method": request.method,
                    "url": str(request.url),
                    "error": str(exc),
                    "process_time": f"{process_time:.4f}s",
                },
                exc_info=True,
            )
            raise


# ============================================================================
# Error Handlers
# ============================================================================


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are invalid input (400)"""
    logger.warning(
        f"Validation error on {request.url}: {make_serializable(exc.errors())}"
    )
    return message_response(status.HTTP_400_BAD_REQUEST, INVALID_PAYLOAD_MESSAGE)


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    """Handle HTTP exceptions"""
    logger.warning(f"HTTP {exc.status_code} on {request.url}: {exc.detail}")
    return message_response(exc.status_code, str(exc.detail))


async def service_exception_handler(request: Request, exc: ServiceError):
    """Handle service-layer errors using the status carried by the exception"""
    if isinstance(exc, StoreUnavailableError):
        # Cause was logged with traceback where it was caught
        logger.error(f"Store unavailable on {request.url}: {exc.message}")
    else:
        logger.warning(f"{type(exc).__name__} on {request.url}: {exc.message}")
    return message_response(exc.http_status, exc.message)


async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors"""
    logger.exception(f"Unexpected error on {request.url}: {str(exc)}")
    return message_response(
        status.HTTP_500_INTERNAL_SERVER_ERROR, UNEXPECTED_ERROR_MESSAGE
    )
