"""Constants for autoapi.

This module provides centralized constants for routes, HTTP methods,
log icons and other magic strings used throughout the package.
"""


class APIRoutes:
    """API route path constants."""

    NAMESPACE = "auto-api"
    VERSION = "v1"
    HEALTH = "/health"
    ROOT = "/"


class HTTPMethods:
    """Standard HTTP methods."""

    GET = "GET"


class LogIcons:
    """Emoji icons for consistent logging."""

    START = "🚀"
    STOP = "🛑"
    ERROR = "❌"
    WARNING = "⚠️"
    DATABASE = "📊"
    DISCOVERY = "🔍"
    REGISTERED = "📝"
    DYNAMIC = "🔄"
    CONTEXT = "🎯"
    CONFIG = "🔧"
    WORLD = "🌐"


class ErrorMessages:
    """Standard error messages."""

    AUTH_REQUIRED = "Authentication required"
    INVALID_API_KEY = "Invalid API key"
    QUERY_FAILED = "Query against the data source failed"
    QUERY_TIMEOUT = "Query against the data source timed out"
    SERIALIZATION_FAILED = "Query result could not be serialized"
    INTERNAL_ERROR = "Internal server error"


class Defaults:
    """Default configuration values."""

    API_TITLE = "autoapi"
    API_VERSION = "1.0.0"
    API_DESCRIPTION = "Read-only JSON endpoints generated from host data sources"

    HOST = "0.0.0.0"
    PORT = 8000
    LOG_LEVEL = "info"

    HOST_TYPE = "memory"
    SQLITE_PATH = "./autoapi.db"
    TABLE_PREFIX = "wp_"

    QUERY_TIMEOUT = 30.0
    API_KEY_HEADER = "x-api-key"


__all__ = [
    "APIRoutes",
    "HTTPMethods",
    "LogIcons",
    "ErrorMessages",
    "Defaults",
]
