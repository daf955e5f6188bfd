"""Endpoint registry builder.

Turns source descriptors into endpoint entries keyed by short name. When
two descriptors resolve to the same short name the later one replaces the
earlier one; the replacement is logged and emitted as a
``NamingCollisionWarning``.
Sources whose short name cannot be a single literal path segment (empty,
or containing ``/``, ``{`` or ``}``) get no endpoint.
"""

import logging
import warnings
from typing import Dict, Iterable

from autoapi.constants import APIRoutes, LogIcons
from autoapi.discovery.models import SourceDescriptor, SourceKind
from autoapi.exceptions import NamingCollisionWarning

from .models import BuildResult, EndpointEntry, NamingCollision

logger = logging.getLogger(__name__)

_UNROUTABLE_CHARS = frozenset("/{}")


def derive_short_name(descriptor: SourceDescriptor, table_prefix: str) -> str:
    """Derive the endpoint name of a source.

    Record type and taxonomy keys are used verbatim. Raw table names lose
    the store prefix (exact, case-sensitive match).
    """
    name = descriptor.raw_identifier
    if (
        descriptor.kind is SourceKind.RAW_TABLE
        and table_prefix
        and name.startswith(table_prefix)
    ):
        return name[len(table_prefix) :]
    return name


def is_routable(short_name: str) -> bool:
    """Whether a short name can be served as one literal path segment."""
    return bool(short_name) and not _UNROUTABLE_CHARS.intersection(short_name)


def display_name_for(short_name: str) -> str:
    """Upper-case the first character, leaving the rest untouched."""
    return short_name[:1].upper() + short_name[1:]


def endpoint_path(
    short_name: str,
    namespace: str = APIRoutes.NAMESPACE,
    version: str = APIRoutes.VERSION,
) -> str:
    return f"/{namespace}/{version}/{short_name}"


class RegistryBuilder:
    """Builds registry mappings from enumeration results.

    Args:
        table_prefix: Store prefix stripped from raw table names
        namespace: First path segment of every endpoint
        version: Second path segment of every endpoint
    """

    def __init__(
        self,
        table_prefix: str = "",
        namespace: str = APIRoutes.NAMESPACE,
        version: str = APIRoutes.VERSION,
    ) -> None:
        self.table_prefix = table_prefix
        self.namespace = namespace
        self.version = version

    def entry_for(self, descriptor: SourceDescriptor) -> EndpointEntry:
        short_name = derive_short_name(descriptor, self.table_prefix)
        return EndpointEntry(
            display_name=display_name_for(short_name),
            path=endpoint_path(short_name, self.namespace, self.version),
            short_name=short_name,
            source=descriptor,
        )

    def build_report(self, descriptors: Iterable[SourceDescriptor]) -> BuildResult:
        """Build a registry and report the collisions met on the way.

        Args:
            descriptors: Descriptors in enumeration order

        Returns:
            BuildResult with the entries, naming collisions and skipped sources
        """
        result = BuildResult()
        for descriptor in descriptors:
            entry = self.entry_for(descriptor)
            if not is_routable(entry.short_name):
                result.skipped.append(descriptor)
                logger.warning(
                    f"{LogIcons.WARNING} Skipping {descriptor.kind.value} "
                    f"'{descriptor.raw_identifier}': endpoint name "
                    f"'{entry.short_name}' is not a valid path segment"
                )
                continue
            previous = result.entries.get(entry.short_name)
            if previous is not None:
                collision = NamingCollision(
                    short_name=entry.short_name,
                    replaced=previous.source,
                    replacement=descriptor,
                )
                result.collisions.append(collision)
                message = (
                    f"Endpoint name '{entry.short_name}' of "
                    f"{previous.source.kind.value} '{previous.source.raw_identifier}' "
                    f"is taken over by {descriptor.kind.value} "
                    f"'{descriptor.raw_identifier}'"
                )
                logger.warning(f"{LogIcons.WARNING} {message}")
                warnings.warn(message, NamingCollisionWarning, stacklevel=2)
            # Overwrite keeps the slot's original position
            result.entries[entry.short_name] = entry
        return result

    def build(self, descriptors: Iterable[SourceDescriptor]) -> Dict[str, EndpointEntry]:
        """Build the registry mapping ``short_name -> EndpointEntry``."""
        return self.build_report(descriptors).entries
