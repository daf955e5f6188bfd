"""Shared fixtures for autoapi tests."""

import aiosqlite
import pytest
import pytest_asyncio

from autoapi.host.memory import InMemoryHost
from autoapi.host.sqlite import SQLiteHost


@pytest.fixture
def blog_host():
    """In-memory host with one record type, two taxonomies and two tables."""
    host = InMemoryHost(table_prefix="wp_")
    host.register_record_type("article", label="Articles")
    host.register_record_type("draft_note", public=False)
    host.register_taxonomy("genre", label="Genres")
    host.register_taxonomy("widgets")

    host.add_author(7, "Ada Lovelace")
    first = host.add_record(
        "article",
        title="First",
        content="<p>One</p>",
        excerpt="One",
        date="2024-01-01 09:00:00",
        author_id=7,
    )
    host.add_record(
        "article",
        title="Second",
        content="<p>Two</p>",
        excerpt="Two",
        date="2024-01-02 09:00:00",
        author_id=99,
    )
    host.add_record("article", title="Hidden", status="draft", author_id=7)
    host.add_meta(first.id, "color", "blue")
    host.add_meta(first.id, "tags", "a")
    host.add_meta(first.id, "tags", "b")

    host.add_term("genre", "Science Fiction", description="Spaceships")
    host.add_term("genre", "Poetry")

    host.add_table("wp_orders", [{"id": 1, "total": 9.5}, {"id": 2, "total": 12.0}])
    host.add_table("wp_widgets", [{"id": 1, "name": "sprocket"}])
    host.add_table("other_logs", [{"id": 1}])
    return host


@pytest_asyncio.fixture
async def sqlite_host(tmp_path):
    """SQLite host with the core schema, seeded content and one extra table."""
    host = SQLiteHost(db_path=str(tmp_path / "site.db"), table_prefix="wp_")
    host.register_record_type("article", label="Articles")
    await host.install_schema()

    async with aiosqlite.connect(host.db_path) as db:
        await db.execute(
            "INSERT INTO wp_users (ID, user_login, display_name) "
            "VALUES (1, 'ada', 'Ada Lovelace')"
        )
        await db.executemany(
            "INSERT INTO wp_posts (ID, post_author, post_date, post_content, "
            "post_title, post_excerpt, post_status, post_type) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (1, 1, "2024-01-01 09:00:00", "Body one", "Older", "", "publish", "article"),
                (2, 1, "2024-03-01 09:00:00", "Body two", "Newer", "Ex", "publish", "article"),
                (3, 1, "2024-04-01 09:00:00", "Body three", "Draft", "", "draft", "article"),
                (4, 1, "2024-02-01 09:00:00", "About", "About us", "", "publish", "page"),
            ],
        )
        await db.executemany(
            "INSERT INTO wp_postmeta (post_id, meta_key, meta_value) VALUES (?, ?, ?)",
            [(1, "color", "blue"), (1, "tags", "a"), (1, "tags", "b")],
        )
        await db.executemany(
            "INSERT INTO wp_terms (term_id, name, slug) VALUES (?, ?, ?)",
            [(1, "Uncategorized", "uncategorized"), (2, "News", "news"), (3, "hot", "hot")],
        )
        await db.executemany(
            "INSERT INTO wp_term_taxonomy (term_id, taxonomy, description, count) "
            "VALUES (?, ?, ?, ?)",
            [(1, "category", "", 0), (2, "category", "Latest", 3), (3, "post_tag", "", 1)],
        )
        await db.execute(
            "CREATE TABLE wp_orders (id INTEGER PRIMARY KEY, total REAL, note TEXT)"
        )
        await db.executemany(
            "INSERT INTO wp_orders (id, total, note) VALUES (?, ?, ?)",
            [(1, 9.5, "first"), (2, 12.0, None)],
        )
        await db.execute("CREATE TABLE audit_log (id INTEGER PRIMARY KEY)")
        await db.commit()

    return host


@pytest_asyncio.fixture
async def malformed_sqlite_host(tmp_path):
    """SQLite host whose posts table allows a NULL title the record model rejects."""
    host = SQLiteHost(
        db_path=str(tmp_path / "malformed.db"), table_prefix="bad_", register_builtins=False
    )
    host.register_record_type("post")

    async with aiosqlite.connect(host.db_path) as db:
        await db.execute(
            "CREATE TABLE bad_posts (ID INTEGER PRIMARY KEY, post_author INTEGER, "
            "post_date TEXT, post_content TEXT, post_title TEXT, post_excerpt TEXT, "
            "post_status TEXT, post_type TEXT)"
        )
        await db.execute(
            "INSERT INTO bad_posts VALUES "
            "(1, 1, '2024-01-01 09:00:00', 'Body', NULL, '', 'publish', 'post')"
        )
        await db.commit()

    return host
