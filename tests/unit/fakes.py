"""In-memory fakes for every provider interface."""

from __future__ import annotations

import asyncio
from collections.abc import Sequence
from pathlib import Path

from pdf_qa.ingestion.loader import DocumentLoader
from pdf_qa.ingestion.models import Page
from pdf_qa.qa.llm import LanguageModel
from pdf_qa.retrieval.base import EmbeddingProvider
from pdf_qa.retrieval.memory_store import InMemoryVectorIndex
from pdf_qa.retrieval.models import ScoredRecord, UpsertReport, VectorRecord


def vectorize(text: str, dimension: int) -> list[float]:
    """Deterministic bag-of-characters vector; never all zeros."""
    vec = [0.0] * dimension
    vec[0] = 1.0
    for ch in text.lower():
        if ch.isalnum():
            vec[ord(ch) % dimension] += 1.0
    return vec


class FakeEmbedder(EmbeddingProvider):
    """Records every call and how many calls overlapped."""

    def __init__(self, dimension: int = 8, *, error: Exception | None = None, wrong_dim: bool = False) -> None:
        self._dimension = dimension
        self.error = error
        self.wrong_dim = wrong_dim
        self.calls: list[list[str]] = []
        self.in_flight = 0
        self.max_in_flight = 0

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        self.calls.append(list(texts))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(0)
            if self.error is not None:
                raise self.error
            size = self._dimension + 1 if self.wrong_dim else self._dimension
            return [vectorize(t, size) for t in texts]
        finally:
            self.in_flight -= 1


class FakeLoader(DocumentLoader):
    def __init__(self, pages: list[Page] | None = None, *, error: Exception | None = None) -> None:
        self.pages = pages or []
        self.error = error
        self.calls: list[Path] = []

    async def load(self, location: Path) -> list[Page]:
        self.calls.append(location)
        if self.error is not None:
            raise self.error
        return list(self.pages)


class FakeLLM(LanguageModel):
    def __init__(self, reply: str = "The agreement can be terminated with 30 days notice.", *, error: Exception | None = None) -> None:
        self.reply = reply
        self.error = error
        self.calls: list[tuple[list, list[str]]] = []

    async def generate(self, prompt, context) -> str:  # noqa: ANN001
        self.calls.append((list(prompt), list(context)))
        if self.error is not None:
            raise self.error
        return self.reply


class SpyIndex(InMemoryVectorIndex):
    """In-memory index that counts reads and writes."""

    def __init__(self, *, report: UpsertReport | None = None, error: Exception | None = None) -> None:
        super().__init__("spy")
        self.report = report
        self.error = error
        self.upserts: list[list[VectorRecord]] = []
        self.queries = 0

    async def _upsert(self, records: list[VectorRecord]) -> UpsertReport:
        self.upserts.append(records)
        if self.error is not None:
            raise self.error
        if self.report is not None:
            return self.report
        return await super()._upsert(records)

    async def _query(self, vector: list[float], k: int) -> list[ScoredRecord]:
        self.queries += 1
        if self.error is not None:
            raise self.error
        return await super()._query(vector, k)
