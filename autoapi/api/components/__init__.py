"""Server components for autoapi."""

from .error_handler import APIErrorHandler
from .logging_config import (
    CentralizedErrorFilter,
    KnownErrorFormatter,
    LoggingConfigurator,
)

__all__ = [
    "APIErrorHandler",
    "CentralizedErrorFilter",
    "KnownErrorFormatter",
    "LoggingConfigurator",
]
