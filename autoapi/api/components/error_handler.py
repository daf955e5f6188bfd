"""Unified error handling for autoapi.

Every exception reaching the app is rendered as a JSON object with
``error_code``, ``message``, ``timestamp`` and ``path``. Server errors are
logged at ERROR with a traceback, client errors at DEBUG.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError
from starlette.exceptions import HTTPException

from autoapi.constants import ErrorMessages
from autoapi.exceptions import AutoAPIException

logger = logging.getLogger(__name__)

_HTTP_ERROR_CODES = {
    401: "unauthorized",
    404: "not_found",
    405: "method_not_allowed",
    422: "validation_error",
    500: "internal_error",
    503: "service_unavailable",
    504: "gateway_timeout",
}


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


class APIErrorHandler:
    """Centralized exception rendering with request context."""

    @staticmethod
    async def handle_exception(request: Request, exc: Exception) -> JSONResponse:
        """Render an exception as a JSON error response.

        Args:
            request: FastAPI request object
            exc: Exception that occurred

        Returns:
            JSONResponse with error details
        """
        if isinstance(exc, AutoAPIException):
            log_extra = {
                "error_code": exc.error_code,
                "status_code": exc.status_code,
                "path": request.url.path,
                "method": request.method,
            }
            if exc.status_code >= 500:
                logger.error(
                    f"API Error [{exc.error_code}]: {exc.message}",
                    exc_info=exc,
                    extra={**log_extra, "details": exc.details},
                )
            else:
                logger.debug(
                    f"API Error [{exc.error_code}]: {exc.message}", extra=log_extra
                )

            response_data = await exc.to_dict()
            response_data["timestamp"] = _timestamp()
            response_data["path"] = request.url.path
            return JSONResponse(status_code=exc.status_code, content=response_data)

        if isinstance(exc, ValidationError):
            logger.debug(f"Validation error: {exc}")
            error_details = [
                {
                    "field": " -> ".join(str(loc) for loc in err.get("loc", [])),
                    "type": err.get("type", "validation_error"),
                    "message": err.get("msg", "Validation failed"),
                }
                for err in exc.errors()
            ]
            return APIErrorHandler.create_error_response(
                "validation_error",
                "Validation failed",
                status_code=422,
                details={"errors": error_details},
                request=request,
            )

        if isinstance(exc, HTTPException):
            error_code = _HTTP_ERROR_CODES.get(exc.status_code, "http_error")
            detail = exc.detail
            if detail is None:
                message = "An error occurred"
            elif isinstance(detail, dict):
                message = detail.get("message") or detail.get("error") or str(detail)
            else:
                message = str(detail)

            if exc.status_code >= 500:
                logger.error(f"HTTP Error [{exc.status_code}]: {message}", exc_info=exc)
            else:
                logger.debug(f"HTTP Error [{exc.status_code}]: {message}")

            response = APIErrorHandler.create_error_response(
                error_code, message, status_code=exc.status_code, request=request
            )
            if exc.headers:
                response.headers.update(exc.headers)
            return response

        logger.error(
            f"Unexpected error: {type(exc).__name__}: {exc}",
            exc_info=exc,
            extra={
                "error_type": type(exc).__name__,
                "path": request.url.path,
                "method": request.method,
            },
        )
        return APIErrorHandler.create_error_response(
            "internal_error",
            ErrorMessages.INTERNAL_ERROR,
            status_code=500,
            request=request,
        )

    @staticmethod
    def create_error_response(
        error_code: str,
        message: str,
        status_code: int = 500,
        details: Optional[Dict[str, Any]] = None,
        request: Optional[Request] = None,
    ) -> JSONResponse:
        """Build the JSON error body shared by every failure path.

        ``details`` is omitted when empty and ``path`` when no request is given.
        """
        response_data: Dict[str, Any] = {
            "error_code": error_code,
            "message": message,
            "timestamp": _timestamp(),
        }
        if details:
            response_data["details"] = details
        if request is not None:
            response_data["path"] = request.url.path

        return JSONResponse(status_code=status_code, content=response_data)


__all__ = ["APIErrorHandler"]
