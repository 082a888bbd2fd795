"""In-process vector index for local development and tests."""

from __future__ import annotations

import numpy as np

from pdf_qa.retrieval.base import VectorIndex
from pdf_qa.retrieval.models import ScoredRecord, UpsertReport, VectorRecord


class InMemoryVectorIndex(VectorIndex):
    """Keeps records in a dict keyed by id; cosine similarity via numpy.

    Upserting an existing id overwrites it, so re-ingesting the same file
    does not duplicate chunks.
    """

    def __init__(self, collection_name: str = "memory") -> None:
        super().__init__(collection_name)
        self._records: dict[str, VectorRecord] = {}

    async def _open(self) -> None:
        return None

    async def _upsert(self, records: list[VectorRecord]) -> UpsertReport:
        for record in records:
            self._records[record.id] = record
        return UpsertReport(stored=len(records))

    async def _query(self, vector: list[float], k: int) -> list[ScoredRecord]:
        if not self._records or k <= 0:
            return []
        records = list(self._records.values())
        matrix = np.asarray([r.vector for r in records], dtype=float)
        query = np.asarray(vector, dtype=float)

        norms = np.linalg.norm(matrix, axis=1) * np.linalg.norm(query)
        norms[norms == 0] = 1.0
        scores = matrix @ query / norms

        # Stable sort keeps insertion order among equal scores.
        order = np.argsort(-scores, kind="stable")[:k]
        return [ScoredRecord(record=records[i], score=float(scores[i])) for i in order]

    async def _count(self) -> int:
        return len(self._records)
