"""Domain models produced while ingesting a document."""

from __future__ import annotations

import hashlib
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class Page(BaseModel):
    """Raw text of one PDF page.

    Attributes
    ----------
    index:
        Zero-based page position within the document.
    text:
        Extracted page text.
    """

    model_config = ConfigDict(frozen=True)

    index: int = Field(ge=0)
    text: str


class Document(BaseModel):
    """A loaded PDF: its file name and ordered pages."""

    model_config = ConfigDict(frozen=True)

    file_name: str
    pages: tuple[Page, ...] = ()


class Chunk(BaseModel):
    """A contiguous slice of a page's text, the unit of embedding and retrieval.

    Attributes
    ----------
    text:
        The chunk content.
    source:
        File name of the originating document.
    page:
        Index of the originating page.
    offset:
        Character position of ``text`` within the page text.
    chunk_index:
        Ordinal position of the chunk within its page.
    """

    model_config = ConfigDict(frozen=True)

    text: str
    source: str = ""
    page: int = 0
    offset: int = 0
    chunk_index: int = 0

    @property
    def chunk_id(self) -> str:
        """Content-addressed identifier derived from text and provenance."""
        key = "\x1f".join((self.source, str(self.page), str(self.offset), self.text))
        return hashlib.sha256(key.encode("utf-8")).hexdigest()[:16]

    def provenance(self) -> dict[str, Any]:
        """Flat metadata stored alongside the vector."""
        return {
            "source": self.source,
            "page": self.page,
            "offset": self.offset,
            "chunk_index": self.chunk_index,
        }


class IngestResult(BaseModel):
    """Outcome of a successful ``ingest`` call."""

    chunk_count: int
    status: str = "success"
    message: str = "pdf is loaded"
