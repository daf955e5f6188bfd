"""Host environment abstraction consumed by discovery and dispatch."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Iterable, List, Sequence

from .models import Record, RecordType, Taxonomy, Term


def quote_identifier(name: str) -> str:
    """Quote a table or column name for use in SQL.

    Args:
        name: Identifier to quote

    Returns:
        Double-quoted identifier with embedded quotes escaped
    """
    return '"' + name.replace('"', '""') + '"'


class HostEnvironment(ABC):
    """Abstract base class for content-management host adapters.

    A host exposes three kinds of data sources (record types, taxonomies
    and raw tables) plus the read queries needed to serve them. All
    methods are asynchronous and must be safe to call concurrently.

    Attributes:
        table_prefix: Prefix shared by every table the host owns
    """

    table_prefix: str = ""

    @abstractmethod
    async def list_public_record_types(self) -> List[RecordType]:
        """List record types that are publicly visible.

        Returns:
            Record types in registration order
        """

    @abstractmethod
    async def list_public_taxonomies(self) -> List[Taxonomy]:
        """List taxonomies that are publicly visible.

        Returns:
            Taxonomies in registration order
        """

    @abstractmethod
    async def list_all_tables(self) -> List[str]:
        """List every physical table in the backing store.

        Returns:
            Table names, unfiltered
        """

    @abstractmethod
    async def fetch_records(self, record_type: str) -> List[Record]:
        """Fetch every published record of a type, without limit.

        Args:
            record_type: Record type name

        Returns:
            Records in the store's natural order
        """

    @abstractmethod
    async def fetch_terms(self, taxonomy: str) -> List[Term]:
        """Fetch every term of a taxonomy, including terms with no records.

        Args:
            taxonomy: Taxonomy name

        Returns:
            Terms in the store's natural order
        """

    @abstractmethod
    async def raw_query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        """Execute a read-only SQL query.

        Args:
            sql: SQL statement
            params: Positional parameters

        Returns:
            Rows as column name to value mappings
        """

    @abstractmethod
    async def lookup_author_name(self, author_id: int) -> str:
        """Resolve an author id to its display name.

        Args:
            author_id: Author (user) id

        Returns:
            Display name, or an empty string for unknown authors
        """

    @abstractmethod
    async def fetch_metadata(self, record_id: int) -> Dict[str, List[Any]]:
        """Fetch the full metadata mapping of a record.

        Args:
            record_id: Record id

        Returns:
            Mapping of meta key to the list of its values
        """

    async def lookup_author_names(self, author_ids: Iterable[int]) -> Dict[int, str]:
        """Resolve several author ids at once.

        Hosts backed by a query engine override this with a single query.

        Args:
            author_ids: Author ids, duplicates allowed

        Returns:
            Mapping of every given id to its display name (empty if unknown)
        """
        names: Dict[int, str] = {}
        for author_id in author_ids:
            if author_id not in names:
                names[author_id] = await self.lookup_author_name(author_id)
        return names

    async def fetch_metadata_many(
        self, record_ids: Iterable[int]
    ) -> Dict[int, Dict[str, List[Any]]]:
        """Fetch the metadata of several records at once.

        Args:
            record_ids: Record ids

        Returns:
            Mapping of every given id to its metadata mapping
        """
        meta: Dict[int, Dict[str, List[Any]]] = {}
        for record_id in record_ids:
            if record_id not in meta:
                meta[record_id] = await self.fetch_metadata(record_id)
        return meta

    async def select_all(self, table: str) -> List[Dict[str, Any]]:
        """Read every row of a table with all of its current columns.

        Args:
            table: Full table name

        Returns:
            Rows in the store's natural order
        """
        return await self.raw_query(f"SELECT * FROM {quote_identifier(table)}")

    async def ping(self) -> bool:
        """Check that the host answers queries.

        Returns:
            True when the host is reachable
        """
        await self.list_all_tables()
        return True

    async def close(self) -> None:
        """Release any resources held by the host."""
        return None
