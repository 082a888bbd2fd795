"""Semantic retriever — embed a question, search the index, attach citations.

This module is the read-side entry point to the vector index.  It never
writes to the index.

Usage::

    retriever = SemanticRetriever(embedder, index, default_k=5)
    results = await retriever.search("What is the termination clause?")
    for r in results:
        print(r.citation.short_ref(), r.content[:80])
"""

from __future__ import annotations

import logging
from typing import Any

from pdf_qa.errors import EmbeddingError, PdfQAError, VectorIndexError
from pdf_qa.retrieval.base import EmbeddingProvider, VectorIndex
from pdf_qa.retrieval.models import Citation, RetrievalResult, ScoredRecord

logger = logging.getLogger(__name__)


class SemanticRetriever:
    """High-level retriever over an :class:`EmbeddingProvider` and a :class:`VectorIndex`.

    Parameters
    ----------
    embedder:
        Must be the same provider / model that ingestion used.
    index:
        A connected vector-index backend.
    default_k:
        Default number of results returned by :meth:`search`.
    score_threshold:
        Minimum similarity score; results below this are discarded.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        *,
        default_k: int = 5,
        score_threshold: float = 0.0,
    ) -> None:
        self._embedder = embedder
        self._index = index
        self.default_k = default_k
        self.score_threshold = score_threshold

    # -- public API -----------------------------------------------------------

    async def search(self, query: str, *, k: int | None = None) -> list[RetrievalResult]:
        """Embed *query* and return ranked results with citations.

        Raises
        ------
        EmbeddingError
            The provider failed or returned a vector of the wrong shape.
        VectorIndexError
            The index query failed.
        """
        embedding = await self._embed_query(query)
        return await self.search_by_embedding(embedding, k=k)

    async def search_by_embedding(
        self,
        embedding: list[float],
        *,
        k: int | None = None,
    ) -> list[RetrievalResult]:
        """Same as :meth:`search` but accepts a pre-computed embedding."""
        k = k if k is not None else self.default_k
        try:
            hits = await self._index.query(embedding, k=k)
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Vector index query failed")
            raise VectorIndexError() from exc
        return self._to_results(hits)

    # -- internals ------------------------------------------------------------

    async def _embed_query(self, query: str) -> list[float]:
        try:
            vectors = await self._embedder.embed([query])
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Embedding the question failed")
            raise EmbeddingError() from exc

        if len(vectors) != 1 or len(vectors[0]) != self._embedder.dimension:
            logger.error(
                "Query embedding has unexpected shape: %d vector(s), expected dim %d",
                len(vectors),
                self._embedder.dimension,
            )
            raise EmbeddingError("Embedding provider returned an unexpected vector dimension")
        return list(vectors[0])

    def _to_results(self, hits: list[ScoredRecord]) -> list[RetrievalResult]:
        results: list[RetrievalResult] = []
        for hit in hits:
            if hit.score < self.score_threshold:
                continue

            meta: dict[str, Any] = hit.record.metadata
            citation = Citation(
                document_id=hit.record.id,
                source=meta.get("source", "unknown"),
                chunk_index=meta.get("chunk_index"),
                page=meta.get("page"),
                score=hit.score,
            )
            results.append(RetrievalResult(content=hit.record.text, citation=citation))
        return results
