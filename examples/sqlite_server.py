"""
SQLite Server Example using autoapi

This example demonstrates serving a WordPress-shaped SQLite database:
- Installs the core schema and seeds a few posts, terms and a custom table
- Registers an extra public record type
- Exposes every discovered source under /auto-api/v1/<name>
- Rediscovers after a table is created at runtime

Run with: python examples/sqlite_server.py
Access docs at: http://localhost:8000/docs
Endpoint index at: http://localhost:8000/auto-api/v1
"""

import asyncio
import os

import aiosqlite

from autoapi import Server, SQLiteHost

DB_PATH = os.getenv("AUTOAPI_SQLITE_PATH", "./example_site.db")


async def seed(host: SQLiteHost) -> None:
    """Create the schema and insert sample content."""
    await host.install_schema()
    async with aiosqlite.connect(host.db_path) as db:
        await db.execute(
            "INSERT OR IGNORE INTO wp_users (ID, user_login, display_name) "
            "VALUES (1, 'admin', 'Site Admin')"
        )
        await db.executemany(
            "INSERT OR IGNORE INTO wp_posts (ID, post_author, post_date, "
            "post_content, post_title, post_excerpt, post_status, post_type) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?)",
            [
                (1, 1, "2024-01-10 08:00:00", "Hello world", "Welcome", "", "publish", "post"),
                (2, 1, "2024-02-01 12:00:00", "Seasonal menu", "Menu", "", "publish", "recipe"),
            ],
        )
        await db.execute(
            "INSERT OR IGNORE INTO wp_postmeta (meta_id, post_id, meta_key, meta_value) "
            "VALUES (1, 2, 'servings', '4')"
        )
        await db.execute(
            "INSERT OR IGNORE INTO wp_terms (term_id, name, slug) "
            "VALUES (1, 'Uncategorized', 'uncategorized')"
        )
        await db.execute(
            "INSERT OR IGNORE INTO wp_term_taxonomy (term_taxonomy_id, term_id, taxonomy) "
            "VALUES (1, 1, 'category')"
        )
        await db.execute(
            "CREATE TABLE IF NOT EXISTS wp_orders (id INTEGER PRIMARY KEY, total REAL)"
        )
        await db.execute("INSERT OR IGNORE INTO wp_orders (id, total) VALUES (1, 19.99)")
        await db.commit()


host = SQLiteHost(db_path=DB_PATH, table_prefix="wp_")
host.register_record_type("recipe", label="Recipes")

server = Server(
    host=host,
    title="Site Data API",
    description="Read-only endpoints for every public source of the site",
    query_timeout=10,
)

app = server.get_app()


@app.post("/admin/rediscover")
async def rediscover():
    """Bring generated endpoints in line with the database again."""
    published = await server.rediscover()
    return {"published": published, "endpoints": server.list_endpoints()}


if __name__ == "__main__":
    asyncio.run(seed(host))
    print("🔧 Starting autoapi SQLite example")
    print("🌐 Endpoint index: http://localhost:8000/auto-api/v1")
    server.run(port=8000)
