"""Host environment adapters.

A host is the content-management runtime autoapi reflects over: it lists
record types, taxonomies and tables, and answers the read queries behind
each generated endpoint.
"""

from .base import HostEnvironment, quote_identifier
from .factory import (
    get_default_host_type,
    get_host,
    list_host_types,
    register_host_type,
    unregister_host_type,
)
from .memory import InMemoryHost
from .models import Record, RecordType, Taxonomy, Term
from .sqlite import SQLiteHost

__all__ = [
    "HostEnvironment",
    "quote_identifier",
    "InMemoryHost",
    "SQLiteHost",
    "Record",
    "RecordType",
    "Taxonomy",
    "Term",
    "get_host",
    "get_default_host_type",
    "list_host_types",
    "register_host_type",
    "unregister_host_type",
]
