"""Chroma implementation of the vector-index abstraction."""

from __future__ import annotations

import logging
from typing import Any

import chromadb

from pdf_qa.config import settings
from pdf_qa.errors import VectorIndexError
from pdf_qa.retrieval.base import VectorIndex
from pdf_qa.retrieval.models import ScoredRecord, UpsertReport, VectorRecord

logger = logging.getLogger(__name__)


def _flat_metadata(metadata: dict[str, Any]) -> dict[str, str | int | float | bool]:
    """Chroma metadata values must be flat str/int/float/bool."""
    return {k: v for k, v in metadata.items() if isinstance(v, (str, int, float, bool))}


class ChromaVectorIndex(VectorIndex):
    """Chroma-backed vector index using the async HTTP client.

    Parameters
    ----------
    collection_name:
        Name of the Chroma collection.
    host:
        Chroma server hostname.
    port:
        Chroma server port.
    upsert_batch_size:
        Max records per upsert request.
    distance_metric:
        HNSW space of a newly created collection; scores are ``1 - distance``.
    """

    def __init__(
        self,
        collection_name: str = settings.chroma_collection,
        *,
        host: str = settings.chroma_host,
        port: int = settings.chroma_port,
        upsert_batch_size: int = settings.upsert_batch_size,
        distance_metric: str = "cosine",
    ) -> None:
        super().__init__(collection_name)
        self._host = host
        self._port = port
        self._upsert_batch_size = upsert_batch_size
        self._distance_metric = distance_metric
        self._client: Any = None
        self._collection: Any = None

    # -- VectorIndex hooks ----------------------------------------------------

    async def _open(self) -> None:
        try:
            self._client = await chromadb.AsyncHttpClient(host=self._host, port=self._port)
            self._collection = await self._client.get_or_create_collection(
                name=self.collection_name,
                metadata={"hnsw:space": self._distance_metric},
            )
        except Exception as exc:
            logger.exception("Could not connect to Chroma at %s:%d", self._host, self._port)
            raise VectorIndexError() from exc

    async def _close(self) -> None:
        self._client = None
        self._collection = None

    async def _upsert(self, records: list[VectorRecord]) -> UpsertReport:
        stored = 0
        for start in range(0, len(records), self._upsert_batch_size):
            batch = records[start : start + self._upsert_batch_size]
            try:
                await self._collection.upsert(
                    ids=[r.id for r in batch],
                    embeddings=[r.vector for r in batch],
                    documents=[r.text for r in batch],
                    metadatas=[_flat_metadata(r.metadata) for r in batch],
                )
            except Exception as exc:
                logger.exception(
                    "Chroma upsert failed at batch starting %d (%d/%d stored)",
                    start,
                    stored,
                    len(records),
                )
                if stored == 0:
                    raise VectorIndexError() from exc
                return UpsertReport(
                    stored=stored,
                    failed=len(records) - stored,
                    error=type(exc).__name__,
                )
            stored += len(batch)
            logger.debug("  upserted %d / %d", stored, len(records))
        return UpsertReport(stored=stored)

    async def _query(self, vector: list[float], k: int) -> list[ScoredRecord]:
        try:
            results = await self._collection.query(
                query_embeddings=[vector],
                n_results=k,
                include=["documents", "metadatas", "distances"],
            )
        except Exception as exc:
            logger.exception("Chroma query failed")
            raise VectorIndexError() from exc

        ids = (results.get("ids") or [[]])[0]
        docs = (results.get("documents") or [[]])[0]
        metas = (results.get("metadatas") or [[]])[0]
        distances = (results.get("distances") or [[]])[0]

        hits: list[ScoredRecord] = []
        for doc_id, content, meta, dist in zip(ids, docs, metas, distances):
            record = VectorRecord(
                id=doc_id,
                vector=[],
                text=content or "",
                metadata=dict(meta or {}),
            )
            hits.append(ScoredRecord(record=record, score=1.0 - float(dist)))
        return hits

    async def _count(self) -> int:
        try:
            return await self._collection.count()
        except Exception as exc:
            logger.exception("Chroma count failed")
            raise VectorIndexError() from exc

    async def health_check(self) -> bool:
        if not self._ready:
            return False
        try:
            await self._client.heartbeat()
            return True
        except Exception:
            logger.warning("Chroma health-check failed", exc_info=True)
            return False
