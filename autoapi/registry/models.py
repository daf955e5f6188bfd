"""Registry entry models."""

from dataclasses import dataclass, field
from typing import Dict, List

from pydantic import BaseModel, ConfigDict

from autoapi.discovery.models import SourceDescriptor


class EndpointEntry(BaseModel):
    """One generated endpoint.

    Attributes:
        display_name: Human-readable label shown in the admin list
        path: Route path, ``/<namespace>/<version>/<short_name>``
        short_name: Registry key and last path segment
        source: Descriptor of the source served by the endpoint
    """

    model_config = ConfigDict(frozen=True)

    display_name: str
    path: str
    short_name: str
    source: SourceDescriptor


@dataclass(frozen=True)
class NamingCollision:
    """Two descriptors that resolved to the same short name."""

    short_name: str
    replaced: SourceDescriptor
    replacement: SourceDescriptor


@dataclass
class BuildResult:
    """Outcome of a registry build."""

    entries: Dict[str, EndpointEntry] = field(default_factory=dict)
    collisions: List[NamingCollision] = field(default_factory=list)
    skipped: List[SourceDescriptor] = field(default_factory=list)
