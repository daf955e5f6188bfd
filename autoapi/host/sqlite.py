"""SQLite host environment over a WordPress-shaped schema."""

import logging
import sqlite3
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator, Dict, Iterable, List, Optional, Sequence

import aiosqlite

from autoapi.constants import LogIcons
from autoapi.exceptions import HostError, HostUnavailableError

from .base import HostEnvironment
from .models import Record, RecordType, Taxonomy, Term

logger = logging.getLogger(__name__)

_BUILTIN_RECORD_TYPES = (
    RecordType(name="post", label="Posts", public=True),
    RecordType(name="page", label="Pages", public=True),
    RecordType(name="attachment", label="Media", public=True),
    RecordType(name="revision", label="Revisions", public=False),
    RecordType(name="nav_menu_item", label="Navigation Menu Items", public=False),
)

_BUILTIN_TAXONOMIES = (
    Taxonomy(name="category", label="Categories", public=True),
    Taxonomy(name="post_tag", label="Tags", public=True),
    Taxonomy(name="nav_menu", label="Navigation Menus", public=False),
)

# Bound parameters per IN (...) list; SQLite limits host parameters per statement.
_IN_CHUNK_SIZE = 500

_SCHEMA = """
CREATE TABLE IF NOT EXISTS {p}users (
    ID INTEGER PRIMARY KEY AUTOINCREMENT,
    user_login TEXT NOT NULL DEFAULT '',
    display_name TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS {p}posts (
    ID INTEGER PRIMARY KEY AUTOINCREMENT,
    post_author INTEGER NOT NULL DEFAULT 0,
    post_date TEXT NOT NULL DEFAULT '',
    post_content TEXT NOT NULL DEFAULT '',
    post_title TEXT NOT NULL DEFAULT '',
    post_excerpt TEXT NOT NULL DEFAULT '',
    post_status TEXT NOT NULL DEFAULT 'publish',
    post_type TEXT NOT NULL DEFAULT 'post'
);
CREATE TABLE IF NOT EXISTS {p}postmeta (
    meta_id INTEGER PRIMARY KEY AUTOINCREMENT,
    post_id INTEGER NOT NULL DEFAULT 0,
    meta_key TEXT,
    meta_value TEXT
);
CREATE TABLE IF NOT EXISTS {p}terms (
    term_id INTEGER PRIMARY KEY AUTOINCREMENT,
    name TEXT NOT NULL DEFAULT '',
    slug TEXT NOT NULL DEFAULT ''
);
CREATE TABLE IF NOT EXISTS {p}term_taxonomy (
    term_taxonomy_id INTEGER PRIMARY KEY AUTOINCREMENT,
    term_id INTEGER NOT NULL DEFAULT 0,
    taxonomy TEXT NOT NULL DEFAULT '',
    description TEXT NOT NULL DEFAULT '',
    count INTEGER NOT NULL DEFAULT 0
);
"""


class SQLiteHost(HostEnvironment):
    """Host environment backed by a SQLite database file.

    Records live in ``<prefix>posts`` with metadata in ``<prefix>postmeta``,
    authors in ``<prefix>users`` and terms in ``<prefix>terms`` joined with
    ``<prefix>term_taxonomy``. Record types and taxonomies are registered in
    code, as a CMS registers them at boot; the built-in ones are registered
    on construction.

    Each query opens its own connection, so concurrent requests never share
    cursor state.

    Args:
        db_path: Path to the SQLite database file
        table_prefix: Prefix of every table owned by the host
        register_builtins: Register the built-in record types and taxonomies
    """

    def __init__(
        self,
        db_path: str = "./autoapi.db",
        table_prefix: str = "wp_",
        register_builtins: bool = True,
    ) -> None:
        self.db_path = str(db_path)
        self.table_prefix = table_prefix
        self._record_types: Dict[str, RecordType] = {}
        self._taxonomies: Dict[str, Taxonomy] = {}
        if register_builtins:
            for record_type in _BUILTIN_RECORD_TYPES:
                self._record_types[record_type.name] = record_type
            for taxonomy in _BUILTIN_TAXONOMIES:
                self._taxonomies[taxonomy.name] = taxonomy

    def register_record_type(
        self, name: str, label: str = "", public: bool = True
    ) -> RecordType:
        """Register (or replace) a record type."""
        record_type = RecordType(name=name, label=label or name, public=public)
        self._record_types[name] = record_type
        return record_type

    def register_taxonomy(
        self, name: str, label: str = "", public: bool = True
    ) -> Taxonomy:
        """Register (or replace) a taxonomy."""
        taxonomy = Taxonomy(name=name, label=label or name, public=public)
        self._taxonomies[name] = taxonomy
        return taxonomy

    def _table(self, suffix: str) -> str:
        return f"{self.table_prefix}{suffix}"

    @asynccontextmanager
    async def _connect(self) -> AsyncIterator[aiosqlite.Connection]:
        if self.db_path != ":memory:":
            parent = Path(self.db_path).parent
            if not parent.exists():
                raise HostUnavailableError(
                    f"Database directory does not exist: {parent}",
                    details={"db_path": self.db_path},
                )
        try:
            conn = await aiosqlite.connect(self.db_path)
        except (sqlite3.Error, OSError) as e:
            raise HostUnavailableError(
                f"Cannot open SQLite database {self.db_path}: {e}",
                details={"db_path": self.db_path},
            ) from e
        conn.row_factory = aiosqlite.Row
        try:
            yield conn
        finally:
            await conn.close()

    async def _fetch(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        async with self._connect() as conn:
            try:
                async with conn.execute(sql, tuple(params)) as cursor:
                    rows = await cursor.fetchall()
            except sqlite3.Error as e:
                raise HostError(f"SQLite query failed: {e}", details={"sql": sql}) from e
        return [dict(row) for row in rows]

    async def install_schema(self) -> None:
        """Create the core tables if they do not exist yet."""
        async with self._connect() as conn:
            await conn.executescript(_SCHEMA.format(p=self.table_prefix))
            await conn.commit()
        logger.info(f"{LogIcons.DATABASE} Core schema installed in {self.db_path}")

    async def list_public_record_types(self) -> List[RecordType]:
        return [rt for rt in self._record_types.values() if rt.public]

    async def list_public_taxonomies(self) -> List[Taxonomy]:
        return [tx for tx in self._taxonomies.values() if tx.public]

    async def list_all_tables(self) -> List[str]:
        rows = await self._fetch(
            "SELECT name FROM sqlite_master "
            "WHERE type = 'table' AND name NOT LIKE 'sqlite_%' ORDER BY name"
        )
        return [row["name"] for row in rows]

    async def fetch_records(self, record_type: str) -> List[Record]:
        rows = await self._fetch(
            f"SELECT ID, post_author, post_date, post_content, post_title, "
            f"post_excerpt, post_status, post_type FROM {self._table('posts')} "
            f"WHERE post_type = ? AND post_status = 'publish' "
            f"ORDER BY post_date DESC, ID DESC",
            (record_type,),
        )
        return [
            Record(
                id=row["ID"],
                type=row["post_type"],
                title=row["post_title"],
                content=row["post_content"],
                excerpt=row["post_excerpt"],
                date=row["post_date"],
                author_id=row["post_author"],
                status=row["post_status"],
            )
            for row in rows
        ]

    async def fetch_terms(self, taxonomy: str) -> List[Term]:
        rows = await self._fetch(
            f"SELECT t.term_id, t.name, t.slug, tt.taxonomy, tt.description "
            f"FROM {self._table('terms')} AS t "
            f"INNER JOIN {self._table('term_taxonomy')} AS tt "
            f"ON t.term_id = tt.term_id "
            f"WHERE tt.taxonomy = ? ORDER BY t.name ASC",
            (taxonomy,),
        )
        return [
            Term(
                id=row["term_id"],
                taxonomy=row["taxonomy"],
                name=row["name"],
                slug=row["slug"],
                description=row["description"],
            )
            for row in rows
        ]

    async def raw_query(
        self, sql: str, params: Sequence[Any] = ()
    ) -> List[Dict[str, Any]]:
        return await self._fetch(sql, params)

    async def lookup_author_name(self, author_id: Optional[int]) -> str:
        if author_id is None:
            return ""
        rows = await self._fetch(
            f"SELECT display_name FROM {self._table('users')} WHERE ID = ?",
            (author_id,),
        )
        return rows[0]["display_name"] if rows else ""

    async def fetch_metadata(self, record_id: int) -> Dict[str, List[Any]]:
        rows = await self._fetch(
            f"SELECT meta_key, meta_value FROM {self._table('postmeta')} "
            f"WHERE post_id = ? ORDER BY meta_id",
            (record_id,),
        )
        meta: Dict[str, List[Any]] = {}
        for row in rows:
            meta.setdefault(row["meta_key"], []).append(row["meta_value"])
        return meta

    async def _fetch_in(
        self, sql: str, ids: Sequence[int]
    ) -> List[Dict[str, Any]]:
        """Run ``sql`` once per chunk of ``ids``; ``{ids}`` marks the IN list."""
        rows: List[Dict[str, Any]] = []
        for start in range(0, len(ids), _IN_CHUNK_SIZE):
            chunk = ids[start:start + _IN_CHUNK_SIZE]
            placeholders = ", ".join("?" for _ in chunk)
            rows.extend(await self._fetch(sql.format(ids=placeholders), chunk))
        return rows

    async def lookup_author_names(self, author_ids: Iterable[int]) -> Dict[int, str]:
        ids = list(dict.fromkeys(author_ids))
        names = {author_id: "" for author_id in ids}
        if not ids:
            return names
        rows = await self._fetch_in(
            f"SELECT ID, display_name FROM {self._table('users')} "
            f"WHERE ID IN ({{ids}})",
            ids,
        )
        for row in rows:
            names[row["ID"]] = row["display_name"]
        return names

    async def fetch_metadata_many(
        self, record_ids: Iterable[int]
    ) -> Dict[int, Dict[str, List[Any]]]:
        ids = list(dict.fromkeys(record_ids))
        meta: Dict[int, Dict[str, List[Any]]] = {record_id: {} for record_id in ids}
        if not ids:
            return meta
        rows = await self._fetch_in(
            f"SELECT post_id, meta_key, meta_value FROM {self._table('postmeta')} "
            f"WHERE post_id IN ({{ids}}) ORDER BY post_id, meta_id",
            ids,
        )
        for row in rows:
            meta[row["post_id"]].setdefault(row["meta_key"], []).append(row["meta_value"])
        return meta
