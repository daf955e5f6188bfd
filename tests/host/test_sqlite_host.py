"""Tests for the SQLite host environment."""

import aiosqlite
import pytest

from autoapi.exceptions import HostError, HostUnavailableError
from autoapi.host.base import quote_identifier
from autoapi.host.sqlite import SQLiteHost


class TestSQLiteHostRegistration:
    """Record type and taxonomy registration."""

    @pytest.mark.asyncio
    async def test_builtin_public_types_and_taxonomies(self, tmp_path):
        """Built-ins are registered and private ones are hidden."""
        host = SQLiteHost(db_path=str(tmp_path / "x.db"))
        record_types = [rt.name for rt in await host.list_public_record_types()]
        taxonomies = [tx.name for tx in await host.list_public_taxonomies()]

        assert record_types == ["post", "page", "attachment"]
        assert taxonomies == ["category", "post_tag"]

    @pytest.mark.asyncio
    async def test_registration_without_builtins(self, tmp_path):
        """register_builtins=False starts with nothing registered."""
        host = SQLiteHost(db_path=str(tmp_path / "x.db"), register_builtins=False)
        host.register_record_type("book")
        host.register_taxonomy("shelf", public=False)

        assert [rt.name for rt in await host.list_public_record_types()] == ["book"]
        assert await host.list_public_taxonomies() == []


class TestSQLiteHostQueries:
    """Queries against a seeded database."""

    @pytest.mark.asyncio
    async def test_list_all_tables(self, sqlite_host):
        """Every user table is listed, sorted by name."""
        tables = await sqlite_host.list_all_tables()
        assert tables == [
            "audit_log",
            "wp_orders",
            "wp_postmeta",
            "wp_posts",
            "wp_term_taxonomy",
            "wp_terms",
            "wp_users",
        ]

    @pytest.mark.asyncio
    async def test_fetch_records_newest_first(self, sqlite_host):
        """Published records of the type come back newest first."""
        records = await sqlite_host.fetch_records("article")
        assert [r.title for r in records] == ["Newer", "Older"]
        assert records[0].author_id == 1
        assert records[0].date == "2024-03-01 09:00:00"

    @pytest.mark.asyncio
    async def test_fetch_terms_includes_empty_terms(self, sqlite_host):
        """Terms with a zero count are returned, ordered by name."""
        terms = await sqlite_host.fetch_terms("category")
        assert [(t.name, t.description) for t in terms] == [
            ("News", "Latest"),
            ("Uncategorized", ""),
        ]

    @pytest.mark.asyncio
    async def test_metadata_and_author(self, sqlite_host):
        """Meta rows are grouped by key; authors resolve to display names."""
        assert await sqlite_host.fetch_metadata(1) == {
            "color": ["blue"],
            "tags": ["a", "b"],
        }
        assert await sqlite_host.lookup_author_name(1) == "Ada Lovelace"
        assert await sqlite_host.lookup_author_name(404) == ""

    @pytest.mark.asyncio
    async def test_batched_metadata_and_authors(self, sqlite_host):
        """Batch lookups cover every requested id, known or not."""
        assert await sqlite_host.lookup_author_names([1, 404, 1]) == {
            1: "Ada Lovelace",
            404: "",
        }
        assert await sqlite_host.fetch_metadata_many([1, 2]) == {
            1: {"color": ["blue"], "tags": ["a", "b"]},
            2: {},
        }
        assert await sqlite_host.lookup_author_names([]) == {}

    @pytest.mark.asyncio
    async def test_batched_lookups_are_chunked(self, sqlite_host, monkeypatch):
        """Long id lists are split into several IN queries."""
        monkeypatch.setattr("autoapi.host.sqlite._IN_CHUNK_SIZE", 1)
        calls = []
        original = sqlite_host._fetch

        async def counting_fetch(sql, params=()):
            calls.append(tuple(params))
            return await original(sql, params)

        monkeypatch.setattr(sqlite_host, "_fetch", counting_fetch)
        meta = await sqlite_host.fetch_metadata_many([1, 2, 4])

        assert calls == [(1,), (2,), (4,)]
        assert meta[1]["tags"] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_select_all_uses_current_schema(self, sqlite_host):
        """Columns reflect the table as it is at query time."""
        rows = await sqlite_host.select_all("wp_orders")
        assert rows == [
            {"id": 1, "total": 9.5, "note": "first"},
            {"id": 2, "total": 12.0, "note": None},
        ]

        async with aiosqlite.connect(sqlite_host.db_path) as db:
            await db.execute("ALTER TABLE wp_orders ADD COLUMN paid INTEGER")
            await db.commit()
        rows = await sqlite_host.select_all("wp_orders")
        assert set(rows[0]) == {"id", "total", "note", "paid"}

    @pytest.mark.asyncio
    async def test_missing_table_raises_host_error(self, sqlite_host):
        """Querying a table that does not exist fails with HostError."""
        with pytest.raises(HostError):
            await sqlite_host.select_all("wp_missing")

    @pytest.mark.asyncio
    async def test_unreachable_database(self, tmp_path):
        """A database in a missing directory is unavailable."""
        host = SQLiteHost(db_path=str(tmp_path / "nope" / "site.db"))
        with pytest.raises(HostUnavailableError):
            await host.list_all_tables()


class TestQuoteIdentifier:
    """SQL identifier quoting."""

    def test_plain_name(self):
        """Names are wrapped in double quotes."""
        assert quote_identifier("wp_orders") == '"wp_orders"'

    def test_embedded_quote(self):
        """Embedded quotes are doubled."""
        assert quote_identifier('we"ird') == '"we""ird"'
