"""Source descriptor models."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class SourceKind(str, Enum):
    """Kind of a discoverable data source."""

    RECORD_COLLECTION = "record_collection"
    TAXONOMY = "taxonomy"
    RAW_TABLE = "raw_table"


class SourceDescriptor(BaseModel):
    """One discoverable data source, as reported by the host.

    Attributes:
        kind: Source kind
        raw_identifier: Record type key, taxonomy key or full table name
    """

    model_config = ConfigDict(frozen=True)

    kind: SourceKind
    raw_identifier: str = Field(min_length=1)
