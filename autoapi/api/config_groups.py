"""Configuration groups for the autoapi Server.

This module provides logical configuration groups that compose into
ServerConfig.
"""

from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from autoapi.constants import Defaults


class HostConfig(BaseModel):
    """Host environment configuration group."""

    host_type: Optional[str] = Field(
        default=None,
        description="Registered host type (memory, sqlite). "
        "Falls back to AUTOAPI_HOST_TYPE or the factory default.",
    )
    sqlite_path: Optional[str] = Field(
        default=None, description="SQLite database file for the sqlite host"
    )
    table_prefix: Optional[str] = Field(
        default=None,
        description="Store table prefix. Falls back to AUTOAPI_TABLE_PREFIX "
        f"or '{Defaults.TABLE_PREFIX}'.",
    )


class DispatchConfig(BaseModel):
    """Query dispatch configuration group."""

    query_timeout: Optional[float] = Field(
        default=Defaults.QUERY_TIMEOUT,
        description="Per-request query timeout in seconds; None disables it",
    )

    @field_validator("query_timeout")
    @classmethod
    def _positive_timeout(cls, value: Optional[float]) -> Optional[float]:
        if value is not None and value <= 0:
            raise ValueError("query_timeout must be positive or None")
        return value


class AuthConfig(BaseModel):
    """Access policy for generated endpoints.

    Generated endpoints are open by default. With ``auth_enabled`` every
    generated endpoint and the endpoint index require one of ``api_keys``
    in the ``api_key_header`` request header.
    """

    auth_enabled: bool = Field(
        default=False, description="Require an API key on generated endpoints"
    )
    api_key_header: str = Field(
        default=Defaults.API_KEY_HEADER, description="Header name for API key"
    )
    api_keys: List[str] = Field(
        default_factory=list, description="Accepted API keys"
    )


class CORSConfig(BaseModel):
    """CORS configuration group."""

    cors_enabled: bool = True
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    cors_methods: List[str] = Field(default_factory=lambda: ["GET"])
    cors_headers: List[str] = Field(default_factory=lambda: ["*"])


__all__ = [
    "HostConfig",
    "DispatchConfig",
    "AuthConfig",
    "CORSConfig",
]
