"""Source enumeration against a host environment."""

import logging
from typing import List

from autoapi.constants import LogIcons
from autoapi.exceptions import DiscoveryError
from autoapi.host.base import HostEnvironment

from .models import SourceDescriptor, SourceKind

logger = logging.getLogger(__name__)


class SourceEnumerator:
    """Lists the data sources a host exposes.

    Descriptors are returned in a fixed order: record collections, then
    taxonomies, then raw tables. The order decides which source wins when
    two of them map to the same endpoint name.

    Args:
        host: Host environment to query
    """

    def __init__(self, host: HostEnvironment) -> None:
        self.host = host

    async def enumerate(self) -> List[SourceDescriptor]:
        """Enumerate every public source of the host.

        Returns:
            Descriptors in enumeration order

        Raises:
            DiscoveryError: If any host call fails
        """
        try:
            record_types = await self.host.list_public_record_types()
            taxonomies = await self.host.list_public_taxonomies()
            tables = await self.host.list_all_tables()
        except Exception as e:
            raise DiscoveryError(
                f"Source enumeration failed: {e}",
                details={"host": type(self.host).__name__},
            ) from e

        descriptors: List[SourceDescriptor] = [
            SourceDescriptor(kind=SourceKind.RECORD_COLLECTION, raw_identifier=rt.name)
            for rt in record_types
        ]
        descriptors.extend(
            SourceDescriptor(kind=SourceKind.TAXONOMY, raw_identifier=tx.name)
            for tx in taxonomies
        )
        descriptors.extend(
            SourceDescriptor(kind=SourceKind.RAW_TABLE, raw_identifier=name)
            for name in self._filter_tables(tables)
        )

        logger.debug(
            f"{LogIcons.DISCOVERY} Enumerated {len(record_types)} record types, "
            f"{len(taxonomies)} taxonomies, "
            f"{len(descriptors) - len(record_types) - len(taxonomies)} tables"
        )
        return descriptors

    def _filter_tables(self, tables: List[str]) -> List[str]:
        """Keep tables carrying the host prefix, dropping duplicates."""
        prefix = self.host.table_prefix
        seen = set()
        kept = []
        for name in tables:
            if not name or not name.startswith(prefix) or name in seen:
                continue
            seen.add(name)
            kept.append(name)
        return kept
