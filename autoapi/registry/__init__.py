"""Endpoint registry for autoapi."""

from .builder import RegistryBuilder, derive_short_name, display_name_for, endpoint_path
from .models import BuildResult, EndpointEntry, NamingCollision
from .store import EndpointRegistry

__all__ = [
    "BuildResult",
    "EndpointEntry",
    "EndpointRegistry",
    "NamingCollision",
    "RegistryBuilder",
    "derive_short_name",
    "display_name_for",
    "endpoint_path",
]
