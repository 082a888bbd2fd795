"""Domain models for vector records, search hits, and citation tracking."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class VectorRecord(BaseModel):
    """A chunk embedding as handed to the vector index.

    Attributes
    ----------
    id:
        Content-derived chunk identifier.
    vector:
        The embedding; its length must match the provider's dimension.
        Query hits from Chroma leave it empty.
    text:
        The chunk content returned on retrieval.
    metadata:
        Flat provenance (``source``, ``page``, ``offset``, ``chunk_index``).
    """

    id: str
    vector: list[float]
    text: str
    metadata: dict[str, Any] = Field(default_factory=dict)


class ScoredRecord(BaseModel):
    """One nearest-neighbour hit; higher ``score`` means more similar."""

    record: VectorRecord
    score: float


class UpsertReport(BaseModel):
    """Result of :meth:`VectorIndex.upsert`.

    ``failed`` is non-zero when the index accepted only part of the
    records; ``error`` then holds a short, credential-free description.
    """

    stored: int
    failed: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.failed == 0


class Citation(BaseModel):
    """Provenance record linking a retrieved chunk back to its source document.

    Attributes
    ----------
    document_id:
        The vector-index ID of the chunk (``None`` when unknown).
    source:
        File name of the PDF the chunk came from.
    chunk_index:
        Ordinal position of the chunk within its page.
    page:
        Page index within the PDF.
    score:
        Similarity score returned by the vector index.
    """

    document_id: str | None = None
    source: str = "unknown"
    chunk_index: int | None = None
    page: int | None = None
    score: float | None = None

    def short_ref(self) -> str:
        """Return a compact ``[source p.page§chunk]`` reference string."""
        page = self.page if self.page is not None else "?"
        chunk = self.chunk_index if self.chunk_index is not None else "?"
        return f"[{self.source} p.{page}§{chunk}]"


class RetrievalResult(BaseModel):
    """A single retrieved passage together with its citation."""

    content: str
    citation: Citation
