"""Ingestion pipeline — PDF → pages → chunks → embeddings → vector index.

Steps run strictly in order and every failure surfaces as a distinct
error kind from :mod:`pdf_qa.errors`:

1. resolve the file name inside the PDF directory (``ValidationError`` /
   ``NotFoundError``, before any provider call);
2. load per-page text (``LoadError``);
3. chunk every page, preserving page order;
4. embed chunks in batches with a bounded number in flight
   (``EmbeddingError``);
5. upsert all records in one call (``VectorIndexError`` /
   ``PartialUpsertError``).

Known limitation: a partial upsert is not rolled back.  The raised
:class:`~pdf_qa.errors.PartialUpsertError` reports how many records
reached the index.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from pathlib import Path

from pdf_qa.errors import (
    EmbeddingError,
    LoadError,
    NotReadyError,
    PartialUpsertError,
    PdfQAError,
    VectorIndexError,
)
from pdf_qa.ingestion.chunker import PageTextSplitter
from pdf_qa.ingestion.loader import DocumentLoader, resolve_document
from pdf_qa.ingestion.models import Chunk, Document, IngestResult, Page
from pdf_qa.retrieval.base import EmbeddingProvider, VectorIndex
from pdf_qa.retrieval.models import VectorRecord

logger = logging.getLogger(__name__)


class IngestionPipeline:
    """Load a PDF from ``pdf_dir`` and store its chunk embeddings.

    Parameters
    ----------
    loader:
        Extracts pages from a resolved document path.
    embedder:
        Embedding provider shared with the question-answering pipeline.
    index:
        Target vector index; must be connected before :meth:`ingest`.
    pdf_dir:
        Directory that caller-supplied file names are resolved against.
    chunk_size / chunk_overlap:
        Chunker parameters.
    batch_size:
        Texts per embedding call.
    max_concurrency:
        Embedding calls allowed in flight at once.
    file_name_max_length:
        Longest accepted file name.
    """

    def __init__(
        self,
        loader: DocumentLoader,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        *,
        pdf_dir: str | Path = "./pdf",
        chunk_size: int = 1000,
        chunk_overlap: int = 50,
        batch_size: int = 64,
        max_concurrency: int = 5,
        file_name_max_length: int = 100,
    ) -> None:
        if batch_size <= 0 or max_concurrency <= 0:
            raise ValueError("batch_size and max_concurrency must be positive")
        self._loader = loader
        self._embedder = embedder
        self._index = index
        self.pdf_dir = Path(pdf_dir)
        self.splitter = PageTextSplitter(chunk_size=chunk_size, chunk_overlap=chunk_overlap)
        self.batch_size = batch_size
        self.max_concurrency = max_concurrency
        self.file_name_max_length = file_name_max_length

    # -- public API -----------------------------------------------------------

    async def ingest(self, file_name: str) -> IngestResult:
        """Ingest ``pdf_dir / file_name`` and return the number of chunks stored."""
        location = resolve_document(file_name, self.pdf_dir, max_length=self.file_name_max_length)
        if not self._index.ready:
            raise NotReadyError()
        document = Document(file_name=file_name, pages=tuple(await self._load(location)))

        chunks = self.chunk_pages(document.pages, source=document.file_name)
        logger.info("Split %s into %d chunk(s) across %d page(s)", file_name, len(chunks), len(document.pages))

        vectors = await self.embed_chunks(chunks)
        records = [
            VectorRecord(id=chunk.chunk_id, vector=vector, text=chunk.text, metadata=chunk.provenance())
            for chunk, vector in zip(chunks, vectors)
        ]
        await self._store(records)

        logger.info("Uploaded %d embeddings for %s to index %r", len(records), file_name, self._index.collection_name)
        return IngestResult(chunk_count=len(records))

    def chunk_pages(self, pages: Sequence[Page], *, source: str) -> list[Chunk]:
        """Chunk every page and concatenate the results in page order."""
        chunks: list[Chunk] = []
        for page in pages:
            chunks.extend(self.splitter.split_page(page, source=source))
        return chunks

    async def embed_chunks(self, chunks: list[Chunk]) -> list[list[float]]:
        """Embed *chunks* in batches, at most ``max_concurrency`` at a time.

        The returned vectors line up with *chunks* regardless of the order
        in which batches complete.  The first failing batch cancels the
        batches still waiting or in flight.
        """
        semaphore = asyncio.Semaphore(self.max_concurrency)
        batches = [
            [c.text for c in chunks[start : start + self.batch_size]]
            for start in range(0, len(chunks), self.batch_size)
        ]

        async def _embed_batch(number: int, texts: list[str]) -> list[list[float]]:
            async with semaphore:
                try:
                    vectors = await self._embedder.embed(texts)
                except PdfQAError:
                    raise
                except Exception as exc:
                    logger.exception("Embedding batch %d/%d failed", number + 1, len(batches))
                    raise EmbeddingError() from exc
            self._check_vectors(vectors, expected=len(texts))
            logger.debug("  embedded batch %d/%d (%d texts)", number + 1, len(batches), len(texts))
            return vectors

        if not batches:
            return []
        tasks = [asyncio.ensure_future(_embed_batch(i, b)) for i, b in enumerate(batches)]
        try:
            await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
        finally:
            for task in tasks:
                if not task.done():
                    task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)

        for task in tasks:
            if not task.cancelled() and task.exception() is not None:
                raise task.exception()
        return [vector for task in tasks for vector in task.result()]

    # -- internals ------------------------------------------------------------

    async def _load(self, location: Path) -> list[Page]:
        try:
            pages = await self._loader.load(location)
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Loading %s failed", location)
            raise LoadError(f"Could not read {location.name!r}") from exc

        if not pages or not any(page.text.strip() for page in pages):
            raise LoadError(f"{location.name!r} contains no extractable text")
        return pages

    def _check_vectors(self, vectors: list[list[float]], *, expected: int) -> None:
        if len(vectors) != expected:
            logger.error("Embedding provider returned %d vectors for %d texts", len(vectors), expected)
            raise EmbeddingError("Embedding provider returned the wrong number of vectors")
        dimension = self._embedder.dimension
        for vector in vectors:
            if len(vector) != dimension:
                logger.error("Embedding dimension %d does not match declared %d", len(vector), dimension)
                raise EmbeddingError("Embedding provider returned an unexpected vector dimension")

    async def _store(self, records: list[VectorRecord]) -> None:
        try:
            report = await self._index.upsert(records)
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Upsert of %d records failed", len(records))
            raise VectorIndexError() from exc

        if not report.ok:
            logger.error(
                "Partial upsert: %d stored, %d failed (%s); index left in a mixed state",
                report.stored,
                report.failed,
                report.error,
            )
            raise PartialUpsertError(stored_count=report.stored, total=len(records))
