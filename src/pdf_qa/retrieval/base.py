"""Abstract interfaces for the embedding provider and vector-index backends.

Adding a new backend (Pinecone, Weaviate, Qdrant …) only requires
subclassing :class:`VectorIndex` and implementing the protected hooks.
The pipelines are backend-agnostic.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence

from pdf_qa.errors import NotReadyError
from pdf_qa.retrieval.models import ScoredRecord, UpsertReport, VectorRecord

logger = logging.getLogger(__name__)


class EmbeddingProvider(ABC):
    """Maps text to fixed-dimension vectors.

    Implementations must be deterministic for a fixed model version and
    must return exactly one vector per input text.
    """

    @property
    @abstractmethod
    def dimension(self) -> int:
        """Length of every vector returned by :meth:`embed`."""
        ...

    @abstractmethod
    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        """Embed *texts*, preserving order."""
        ...


class VectorIndex(ABC):
    """Backend-agnostic vector-index interface.

    The handle is established once by :meth:`connect`; concurrent callers
    wait on the same initialisation.  Every data operation raises
    :class:`~pdf_qa.errors.NotReadyError` until that has happened.

    Parameters
    ----------
    collection_name:
        Logical name of the collection / index / namespace.
    """

    def __init__(self, collection_name: str) -> None:
        self.collection_name = collection_name
        self._ready = False
        self._init_lock = asyncio.Lock()

    # -- lifecycle ------------------------------------------------------------

    @property
    def ready(self) -> bool:
        return self._ready

    async def connect(self) -> None:
        """Open the backend handle exactly once.  Safe to call repeatedly."""
        if self._ready:
            return
        async with self._init_lock:
            if self._ready:
                return
            await self._open()
            self._ready = True
            logger.info("Vector index %r ready (%s)", self.collection_name, type(self).__name__)

    async def close(self) -> None:
        """Release the backend handle; :meth:`connect` may be called again."""
        async with self._init_lock:
            if self._ready:
                await self._close()
                self._ready = False

    def _require_ready(self) -> None:
        if not self._ready:
            raise NotReadyError()

    # -- data operations ------------------------------------------------------

    async def upsert(self, records: Sequence[VectorRecord]) -> UpsertReport:
        """Insert or overwrite *records* keyed by ``record.id``."""
        self._require_ready()
        if not records:
            return UpsertReport(stored=0)
        return await self._upsert(list(records))

    async def query(self, vector: Sequence[float], k: int = 5) -> list[ScoredRecord]:
        """Return up to *k* records ordered by descending similarity."""
        self._require_ready()
        if k <= 0:
            return []
        hits = await self._query(list(vector), k)
        return sorted(hits, key=lambda h: h.score, reverse=True)[:k]

    async def count(self) -> int:
        """Number of records currently stored."""
        self._require_ready()
        return await self._count()

    async def health_check(self) -> bool:
        """Return ``True`` when the backend is reachable and ready."""
        return self._ready

    # -- required overrides ---------------------------------------------------

    @abstractmethod
    async def _open(self) -> None:
        ...

    @abstractmethod
    async def _upsert(self, records: list[VectorRecord]) -> UpsertReport:
        ...

    @abstractmethod
    async def _query(self, vector: list[float], k: int) -> list[ScoredRecord]:
        ...

    @abstractmethod
    async def _count(self) -> int:
        ...

    # -- optional overrides ---------------------------------------------------

    async def _close(self) -> None:
        return None
