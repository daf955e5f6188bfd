"""
Custom Host Example using autoapi

Shows how to plug a new host environment into the host factory and
build a server from configuration alone.

Run with: python examples/custom_host_example.py
"""

from typing import Any, Dict

from autoapi import InMemoryHost, Server
from autoapi.host import register_host_type


class CatalogHost(InMemoryHost):
    """In-memory host pre-populated with a product catalog."""

    def __init__(self, table_prefix: str = "shop_") -> None:
        super().__init__(table_prefix=table_prefix)
        self.register_record_type("product", label="Products")
        self.register_taxonomy("department", label="Departments")
        self.add_author(1, "Catalog Bot")
        self.add_record(
            "product", title="Kettle", content="1.7l steel kettle", author_id=1
        )
        self.add_term("department", "Kitchen")
        self.add_table("shop_stock", [{"sku": "KT-17", "count": 12}])


def catalog_configurator(kwargs: Dict[str, Any]) -> CatalogHost:
    return CatalogHost(table_prefix=kwargs.get("table_prefix") or "shop_")


register_host_type("catalog", CatalogHost, catalog_configurator)

server = Server(host_type="catalog", title="Catalog API")
app = server.get_app()

if __name__ == "__main__":
    # Serves /auto-api/v1/product, /auto-api/v1/department and /auto-api/v1/stock
    server.run(port=8000)
