"""Query dispatch for generated endpoints.

Each source kind has its own read and projection:

- record collections: ``{id, title, content, excerpt, date, author, meta}``
- taxonomies: ``{id, name, slug, description}``
- raw tables: every column of every row, as stored

Rows keep the store's retrieval order. Nothing is cached between calls.
"""

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder

from autoapi.constants import ErrorMessages, LogIcons
from autoapi.discovery.models import SourceKind
from autoapi.exceptions import DispatchError, DispatchTimeoutError
from autoapi.host.base import HostEnvironment
from autoapi.registry.models import EndpointEntry

logger = logging.getLogger(__name__)

QueryResult = List[Dict[str, Any]]


class QueryDispatcher:
    """Runs the source-specific read behind a generated endpoint.

    Args:
        host: Host environment to query
        timeout: Seconds allowed per dispatch, or None for no limit
    """

    def __init__(self, host: HostEnvironment, timeout: Optional[float] = None) -> None:
        self.host = host
        self.timeout = timeout

    async def dispatch(self, entry: EndpointEntry) -> QueryResult:
        """Query the entry's source and return JSON-safe rows.

        Args:
            entry: Registry entry captured at route registration

        Returns:
            Rows in store order; empty when the source has none

        Raises:
            DispatchTimeoutError: If the query exceeds the timeout
            DispatchError: If the query fails, the host returns malformed data
                or the rows cannot be serialized
        """
        details = {
            "endpoint": entry.path,
            "source": entry.source.raw_identifier,
            "kind": entry.source.kind.value,
        }
        try:
            rows = await asyncio.wait_for(self._query(entry), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            raise DispatchTimeoutError(
                ErrorMessages.QUERY_TIMEOUT,
                details={**details, "timeout": self.timeout},
            ) from e
        except DispatchError:
            raise
        except Exception as e:
            raise DispatchError(
                f"{ErrorMessages.QUERY_FAILED}: {e}", details=details
            ) from e

        try:
            return jsonable_encoder(rows)
        except Exception as e:
            raise DispatchError(
                f"{ErrorMessages.SERIALIZATION_FAILED}: {e}", details=details
            ) from e

    async def _query(self, entry: EndpointEntry) -> QueryResult:
        kind = entry.source.kind
        identifier = entry.source.raw_identifier
        logger.debug(f"{LogIcons.DATABASE} Dispatching {kind.value} '{identifier}'")

        if kind is SourceKind.RECORD_COLLECTION:
            return await self.fetch_collection(identifier)
        if kind is SourceKind.TAXONOMY:
            return await self.fetch_taxonomy(identifier)
        if kind is SourceKind.RAW_TABLE:
            return await self.fetch_table(identifier)
        raise DispatchError(f"Unsupported source kind: {kind}")

    async def fetch_collection(self, record_type: str) -> QueryResult:
        records = await self.host.fetch_records(record_type)
        if not records:
            return []
        authors = await self.host.lookup_author_names(
            record.author_id for record in records if record.author_id is not None
        )
        meta = await self.host.fetch_metadata_many(record.id for record in records)
        return [
            {
                "id": record.id,
                "title": record.title,
                "content": record.content,
                "excerpt": record.excerpt,
                "date": record.date,
                "author": authors.get(record.author_id, ""),
                "meta": meta.get(record.id, {}),
            }
            for record in records
        ]

    async def fetch_taxonomy(self, taxonomy: str) -> QueryResult:
        terms = await self.host.fetch_terms(taxonomy)
        return [
            {
                "id": term.id,
                "name": term.name,
                "slug": term.slug,
                "description": term.description,
            }
            for term in terms
        ]

    async def fetch_table(self, table: str) -> QueryResult:
        return [dict(row) for row in await self.host.select_all(table)]
