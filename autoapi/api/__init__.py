"""API module for autoapi.

This module provides:
- Server implementation with FastAPI integration
- Route binding and query dispatch for generated endpoints
- Access policy and error handling
"""

from .binder import RouteBinder
from .config import ServerConfig
from .config_groups import AuthConfig, CORSConfig, DispatchConfig, HostConfig
from .dispatch import QueryDispatcher
from .server import Server, create_server

__all__ = [
    "Server",
    "ServerConfig",
    "create_server",
    "HostConfig",
    "DispatchConfig",
    "AuthConfig",
    "CORSConfig",
    "QueryDispatcher",
    "RouteBinder",
]
