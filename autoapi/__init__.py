"""
autoapi - Read-only JSON endpoints generated from a host's data sources.

autoapi reflects over a content-management host (record types, taxonomies
and raw database tables) and exposes every source as a GET endpoint under
``/auto-api/v1/<name>``. The endpoint set is rebuilt on each discovery pass
and listed for admin displays.

Main Exports (Import from top level):
    API:
        - Server: FastAPI server exposing the generated endpoints
        - ServerConfig: Server configuration
        - create_server: Convenience constructor

    Hosts:
        - HostEnvironment: Host interface
        - InMemoryHost: Dictionary-backed host
        - SQLiteHost: SQLite host over a WordPress-shaped schema
        - get_host: Host factory function

    Pipeline:
        - SourceEnumerator, SourceDescriptor, SourceKind
        - RegistryBuilder, EndpointRegistry, EndpointEntry
        - QueryDispatcher, RouteBinder

    Modules:
        - exceptions: Custom exception classes

Example:
    >>> from autoapi import InMemoryHost, Server
    >>>
    >>> host = InMemoryHost(table_prefix="wp_")
    >>> host.register_record_type("article")
    >>> server = Server(host=host, title="My API")
"""

__version__ = "0.1.0"

# Modules
from . import exceptions

# API server
from .api import (
    QueryDispatcher,
    RouteBinder,
    Server,
    ServerConfig,
    create_server,
)

# Discovery
from .discovery import SourceDescriptor, SourceEnumerator, SourceKind

# Hosts
from .host import (
    HostEnvironment,
    InMemoryHost,
    SQLiteHost,
    get_host,
)

# Registry
from .registry import EndpointEntry, EndpointRegistry, RegistryBuilder

__all__ = [
    # Version
    "__version__",
    # API
    "Server",
    "ServerConfig",
    "create_server",
    "QueryDispatcher",
    "RouteBinder",
    # Hosts
    "HostEnvironment",
    "InMemoryHost",
    "SQLiteHost",
    "get_host",
    # Pipeline
    "SourceDescriptor",
    "SourceEnumerator",
    "SourceKind",
    "EndpointEntry",
    "EndpointRegistry",
    "RegistryBuilder",
    # Modules
    "exceptions",
]
