"""Configuration models for the autoapi Server.

This module provides the top-level server configuration. Group settings
(host, dispatch, auth, CORS) may be given either as nested groups or as
flat keyword arguments, which are routed into their group.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, Field, model_validator

from autoapi.constants import APIRoutes, Defaults

from .config_groups import AuthConfig, CORSConfig, DispatchConfig, HostConfig

_GROUPS = {
    "host_config": HostConfig,
    "dispatch": DispatchConfig,
    "auth": AuthConfig,
    "cors": CORSConfig,
}


class ServerConfig(BaseModel):
    """Configuration model for the autoapi Server.

    Attributes:
        title: API title
        description: API description
        version: API version
        debug: Enable debug mode
        host: Server bind address
        port: Server port number
        docs_url: OpenAPI documentation URL
        redoc_url: ReDoc documentation URL
        log_level: Logging level
        namespace: First path segment of generated endpoints
        api_version: Second path segment of generated endpoints
        discover_on_startup: Run discovery when the app starts
        host_config: Host environment group
        dispatch: Query dispatch group
        auth: Access policy group
        cors: CORS group
    """

    # API Configuration
    title: str = Defaults.API_TITLE
    description: str = Defaults.API_DESCRIPTION
    version: str = Defaults.API_VERSION
    debug: bool = False

    # Server Configuration
    host: str = Defaults.HOST
    port: int = Defaults.PORT
    docs_url: Optional[str] = "/docs"
    redoc_url: Optional[str] = "/redoc"

    # Logging Configuration
    log_level: str = Defaults.LOG_LEVEL

    # Generated endpoints
    namespace: str = APIRoutes.NAMESPACE
    api_version: str = APIRoutes.VERSION
    discover_on_startup: bool = True

    # Groups
    host_config: HostConfig = Field(default_factory=HostConfig)
    dispatch: DispatchConfig = Field(default_factory=DispatchConfig)
    auth: AuthConfig = Field(default_factory=AuthConfig)
    cors: CORSConfig = Field(default_factory=CORSConfig)

    @model_validator(mode="before")
    @classmethod
    def _route_flat_settings(cls, data: Any) -> Any:
        """Move flat group keys (e.g. ``table_prefix``) into their group."""
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for group_name, group_cls in _GROUPS.items():
            group = data.get(group_name)
            if isinstance(group, BaseModel):
                group = group.model_dump()
            group_values: Dict[str, Any] = dict(group or {})
            for key in group_cls.model_fields:
                if key in data and key not in cls.model_fields:
                    group_values[key] = data.pop(key)
            if group_values:
                data[group_name] = group_values
        return data
