"""Logging configuration for the autoapi server.

The API error handler is the single place where request errors are
logged. This module keeps uvicorn/starlette from logging the same
exceptions a second time and drops tracebacks for client errors.
"""

import logging
import traceback

from starlette.exceptions import HTTPException

from autoapi.exceptions import AutoAPIException

ERROR_HANDLER_LOGGER = "autoapi.api.components.error_handler"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def _is_client_error(exc_type, exc_value) -> bool:
    """Check if an exception is a known client error (4xx)."""
    if isinstance(exc_value, (HTTPException, AutoAPIException)):
        return exc_value.status_code < 500
    return False


class CentralizedErrorFilter(logging.Filter):
    """Suppress framework-level error records.

    uvicorn and starlette log unhandled exceptions before our handler runs;
    those records are dropped so each error is logged exactly once.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == ERROR_HANDLER_LOGGER:
            return True

        if (
            record.name in ("uvicorn.error", "starlette.error")
            and record.levelno >= logging.ERROR
        ):
            return False

        if record.levelno >= logging.ERROR:
            message = record.getMessage()
            if "Exception in ASGI application" in message:
                return False

        return True


class KnownErrorFormatter(logging.Formatter):
    """Formatter that omits stack traces for client errors."""

    def formatException(self, ei):  # noqa: N802
        if not ei:
            return ""

        exc_type, exc_value, exc_tb = ei
        if _is_client_error(exc_type, exc_value):
            return ""

        result = super().formatException(ei)
        if result:
            return result
        return "".join(traceback.format_exception(exc_type, exc_value, exc_tb))


class LoggingConfigurator:
    """Installs the error filter and formatter on framework loggers."""

    @staticmethod
    def configure_exception_logging() -> None:
        """Attach the centralized filter and known-error formatter.

        Safe to call more than once; existing filters are not duplicated.
        """
        error_filter = CentralizedErrorFilter()
        formatter = KnownErrorFormatter(LOG_FORMAT)

        for name in ("uvicorn.error", "starlette.error"):
            framework_logger = logging.getLogger(name)
            if not any(
                isinstance(f, CentralizedErrorFilter) for f in framework_logger.filters
            ):
                framework_logger.addFilter(error_filter)
            for handler in framework_logger.handlers:
                handler.setFormatter(formatter)

        for handler in logging.getLogger().handlers:
            if not any(isinstance(f, CentralizedErrorFilter) for f in handler.filters):
                handler.addFilter(error_filter)
            handler.setFormatter(formatter)


__all__ = [
    "CentralizedErrorFilter",
    "KnownErrorFormatter",
    "LoggingConfigurator",
]
