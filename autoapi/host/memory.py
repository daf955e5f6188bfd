"""In-memory host environment.

Keeps record types, taxonomies, records, terms and raw tables in plain
dictionaries. Useful for embedding autoapi in tests and for hosts whose
data is produced by the application itself.
"""

import asyncio
import itertools
from typing import Any, Dict, List, Optional, Sequence, Set

from autoapi.exceptions import HostError, HostUnavailableError

from .base import HostEnvironment
from .models import Record, RecordType, Taxonomy, Term


class InMemoryHost(HostEnvironment):
    """Dictionary-backed host environment.

    Args:
        table_prefix: Prefix identifying tables owned by the host
        available: When False every query raises HostUnavailableError

    Example:
        ```python
        host = InMemoryHost(table_prefix="wp_")
        host.register_record_type("article")
        host.add_record("article", title="Hello", author_id=1)
        host.add_author(1, "Ada")
        host.add_table("wp_orders", [{"id": 1, "total": 9.5}])
        ```
    """

    def __init__(self, table_prefix: str = "wp_", available: bool = True) -> None:
        self.table_prefix = table_prefix
        self.available = available
        self._record_types: Dict[str, RecordType] = {}
        self._taxonomies: Dict[str, Taxonomy] = {}
        self._records: List[Record] = []
        self._terms: List[Term] = []
        self._authors: Dict[int, str] = {}
        self._meta: Dict[int, Dict[str, List[Any]]] = {}
        self._tables: Dict[str, List[Dict[str, Any]]] = {}
        self._failing: Set[str] = set()
        self._latency: Dict[str, float] = {}
        self._ids = itertools.count(1)

    # Population helpers

    def register_record_type(
        self, name: str, label: str = "", public: bool = True
    ) -> RecordType:
        record_type = RecordType(name=name, label=label or name, public=public)
        self._record_types[name] = record_type
        return record_type

    def register_taxonomy(
        self, name: str, label: str = "", public: bool = True
    ) -> Taxonomy:
        taxonomy = Taxonomy(name=name, label=label or name, public=public)
        self._taxonomies[name] = taxonomy
        return taxonomy

    def add_record(
        self, record_type: str, id: Optional[int] = None, **fields: Any
    ) -> Record:
        record = Record(
            id=id if id is not None else next(self._ids), type=record_type, **fields
        )
        self._records.append(record)
        return record

    def add_term(
        self,
        taxonomy: str,
        name: str,
        slug: Optional[str] = None,
        description: str = "",
        id: Optional[int] = None,
    ) -> Term:
        term = Term(
            id=id if id is not None else next(self._ids),
            taxonomy=taxonomy,
            name=name,
            slug=slug or name.lower().replace(" ", "-"),
            description=description,
        )
        self._terms.append(term)
        return term

    def add_author(self, author_id: int, display_name: str) -> None:
        self._authors[author_id] = display_name

    def add_meta(self, record_id: int, key: str, value: Any) -> None:
        self._meta.setdefault(record_id, {}).setdefault(key, []).append(value)

    def add_table(self, name: str, rows: Optional[List[Dict[str, Any]]] = None) -> None:
        self._tables[name] = [dict(row) for row in rows or []]

    def drop_table(self, name: str) -> None:
        self._tables.pop(name, None)

    def fail_source(self, name: str, failing: bool = True) -> None:
        """Make queries against a record type, taxonomy or table fail."""
        if failing:
            self._failing.add(name)
        else:
            self._failing.discard(name)

    def set_latency(self, name: str, seconds: float) -> None:
        """Delay queries against a record type, taxonomy or table."""
        self._latency[name] = seconds

    # HostEnvironment implementation

    async def _enter(self, source: Optional[str] = None) -> None:
        if not self.available:
            raise HostUnavailableError("In-memory host is marked unavailable")
        if source is None:
            return
        delay = self._latency.get(source)
        if delay:
            await asyncio.sleep(delay)
        if source in self._failing:
            raise HostError(
                f"Query against '{source}' failed", details={"source": source}
            )

    async def list_public_record_types(self) -> List[RecordType]:
        await self._enter()
        return [rt for rt in self._record_types.values() if rt.public]

    async def list_public_taxonomies(self) -> List[Taxonomy]:
        await self._enter()
        return [tx for tx in self._taxonomies.values() if tx.public]

    async def list_all_tables(self) -> List[str]:
        await self._enter()
        return list(self._tables)

    async def fetch_records(self, record_type: str) -> List[Record]:
        await self._enter(record_type)
        return [
            r for r in self._records if r.type == record_type and r.status == "publish"
        ]

    async def fetch_terms(self, taxonomy: str) -> List[Term]:
        await self._enter(taxonomy)
        return [t for t in self._terms if t.taxonomy == taxonomy]

    async def raw_query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        await self._enter()
        raise HostError("The in-memory host does not execute SQL")

    async def select_all(self, table: str) -> List[Dict[str, Any]]:
        await self._enter(table)
        if table not in self._tables:
            raise HostError(f"no such table: {table}", details={"table": table})
        return [dict(row) for row in self._tables[table]]

    async def lookup_author_name(self, author_id: int) -> str:
        await self._enter()
        return self._authors.get(author_id, "")

    async def fetch_metadata(self, record_id: int) -> Dict[str, List[Any]]:
        await self._enter()
        return {key: list(values) for key, values in self._meta.get(record_id, {}).items()}
