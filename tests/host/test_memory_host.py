"""Tests for the in-memory host environment."""

import pytest

from autoapi.exceptions import HostError, HostUnavailableError
from autoapi.host.memory import InMemoryHost


class TestInMemoryHostListing:
    """Listing record types, taxonomies and tables."""

    @pytest.mark.asyncio
    async def test_only_public_types_and_taxonomies_are_listed(self, blog_host):
        """Private record types are not listed."""
        record_types = await blog_host.list_public_record_types()
        taxonomies = await blog_host.list_public_taxonomies()

        assert [rt.name for rt in record_types] == ["article"]
        assert [tx.name for tx in taxonomies] == ["genre", "widgets"]

    @pytest.mark.asyncio
    async def test_list_all_tables_is_unfiltered(self, blog_host):
        """Tables outside the prefix are still reported by the host."""
        tables = await blog_host.list_all_tables()
        assert tables == ["wp_orders", "wp_widgets", "other_logs"]

    @pytest.mark.asyncio
    async def test_unavailable_host_raises(self):
        """An unavailable host fails every call."""
        host = InMemoryHost(available=False)
        with pytest.raises(HostUnavailableError):
            await host.list_public_record_types()
        with pytest.raises(HostUnavailableError):
            await host.ping()


class TestInMemoryHostQueries:
    """Record, term and table queries."""

    @pytest.mark.asyncio
    async def test_fetch_records_returns_published_only(self, blog_host):
        """Draft records are excluded, insertion order is kept."""
        records = await blog_host.fetch_records("article")
        assert [r.title for r in records] == ["First", "Second"]

    @pytest.mark.asyncio
    async def test_fetch_terms_includes_every_term(self, blog_host):
        """Terms are returned with generated slugs."""
        terms = await blog_host.fetch_terms("genre")
        assert [(t.name, t.slug) for t in terms] == [
            ("Science Fiction", "science-fiction"),
            ("Poetry", "poetry"),
        ]
        assert await blog_host.fetch_terms("widgets") == []

    @pytest.mark.asyncio
    async def test_metadata_groups_values_per_key(self, blog_host):
        """Repeated meta keys collect every value."""
        records = await blog_host.fetch_records("article")
        meta = await blog_host.fetch_metadata(records[0].id)
        assert meta == {"color": ["blue"], "tags": ["a", "b"]}
        assert await blog_host.fetch_metadata(records[1].id) == {}

    @pytest.mark.asyncio
    async def test_author_lookup(self, blog_host):
        """Unknown authors resolve to an empty name."""
        assert await blog_host.lookup_author_name(7) == "Ada Lovelace"
        assert await blog_host.lookup_author_name(12345) == ""

    @pytest.mark.asyncio
    async def test_batch_lookups_fall_back_to_single_lookups(self, blog_host):
        """The base batch methods resolve each distinct id once."""
        records = await blog_host.fetch_records("article")
        ids = [record.id for record in records]

        assert await blog_host.lookup_author_names([7, 12345, 7]) == {
            7: "Ada Lovelace",
            12345: "",
        }
        meta = await blog_host.fetch_metadata_many(ids)
        assert list(meta) == ids
        assert meta[ids[0]] == {"color": ["blue"], "tags": ["a", "b"]}
        assert meta[ids[1]] == {}

    @pytest.mark.asyncio
    async def test_select_all_returns_copies(self, blog_host):
        """Mutating returned rows does not change the stored table."""
        rows = await blog_host.select_all("wp_orders")
        rows[0]["total"] = 0
        again = await blog_host.select_all("wp_orders")
        assert again[0]["total"] == 9.5

    @pytest.mark.asyncio
    async def test_select_all_on_dropped_table_fails(self, blog_host):
        """Dropped tables raise a HostError."""
        blog_host.drop_table("wp_orders")
        with pytest.raises(HostError):
            await blog_host.select_all("wp_orders")

    @pytest.mark.asyncio
    async def test_failure_injection(self, blog_host):
        """fail_source makes queries against one source fail."""
        blog_host.fail_source("genre")
        with pytest.raises(HostError):
            await blog_host.fetch_terms("genre")

        blog_host.fail_source("genre", failing=False)
        assert len(await blog_host.fetch_terms("genre")) == 2

    @pytest.mark.asyncio
    async def test_raw_sql_is_not_supported(self, blog_host):
        """The in-memory host refuses raw SQL."""
        with pytest.raises(HostError):
            await blog_host.raw_query("SELECT 1")
