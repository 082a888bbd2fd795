"""
Retrieval — vector indexes, the embedding interface, and semantic search.

This package wraps the vector index behind a clean interface so that the
pipelines never need to know which database is backing retrieval.

Public surface
--------------
- :class:`SemanticRetriever` — question → ranked passages with citations.
- :class:`VectorIndex` / :class:`EmbeddingProvider` — abstract backends.
- :class:`InMemoryVectorIndex` — numpy-backed index for local use.
- :class:`ChromaVectorIndex` — default Chroma backend (lazy import).
- :class:`VectorRecord`, :class:`ScoredRecord`, :class:`UpsertReport`,
  :class:`Citation`, :class:`RetrievalResult` — data models.
"""

from pdf_qa.retrieval.base import EmbeddingProvider, VectorIndex
from pdf_qa.retrieval.memory_store import InMemoryVectorIndex
from pdf_qa.retrieval.models import (
    Citation,
    RetrievalResult,
    ScoredRecord,
    UpsertReport,
    VectorRecord,
)
from pdf_qa.retrieval.retriever import SemanticRetriever

__all__ = [
    "ChromaVectorIndex",
    "Citation",
    "EmbeddingProvider",
    "InMemoryVectorIndex",
    "RetrievalResult",
    "ScoredRecord",
    "SemanticRetriever",
    "UpsertReport",
    "VectorIndex",
    "VectorRecord",
]


def __getattr__(name: str):  # noqa: ANN001
    """Lazy-import ChromaVectorIndex to avoid pulling in chromadb at import time."""
    if name == "ChromaVectorIndex":
        from pdf_qa.retrieval.chroma_store import ChromaVectorIndex

        return ChromaVectorIndex
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
