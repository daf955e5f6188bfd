"""Value models returned by host environments."""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class RecordType(BaseModel):
    """A registered class of structured content items (e.g. ``post``, ``page``)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: str = ""
    public: bool = True


class Taxonomy(BaseModel):
    """A registered classification scheme (e.g. ``category``)."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    label: str = ""
    public: bool = True


class Record(BaseModel):
    """A single content item of some record type."""

    model_config = ConfigDict(frozen=True)

    id: int
    type: str
    title: str = ""
    content: str = ""
    excerpt: str = ""
    date: Any = None
    author_id: Optional[int] = None
    status: str = "publish"


class Term(BaseModel):
    """A single term of a taxonomy."""

    model_config = ConfigDict(frozen=True)

    id: int
    taxonomy: str
    name: str
    slug: str
    description: str = ""
