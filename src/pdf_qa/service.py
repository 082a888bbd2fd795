"""Service wiring — one explicitly constructed object owning both pipelines.

The vector-index handle is injected, initialised once by :meth:`start`,
and shared read-mostly by every request.  Nothing lives in module-level
state.

Usage::

    service = build_service(settings)
    await service.start()
    await service.ingest("contract.pdf")
    answer = await service.answer("What is the termination clause?")
"""

from __future__ import annotations

import logging

from pdf_qa.config import Settings, settings
from pdf_qa.errors import NotReadyError
from pdf_qa.ingestion.loader import DocumentLoader, PyPDFDocumentLoader
from pdf_qa.ingestion.models import IngestResult
from pdf_qa.ingestion.pipeline import IngestionPipeline
from pdf_qa.qa.llm import LanguageModel
from pdf_qa.qa.models import Answer
from pdf_qa.qa.pipeline import QAPipeline
from pdf_qa.retrieval.base import EmbeddingProvider, VectorIndex
from pdf_qa.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


class PdfQAService:
    """Front door used by the HTTP layer (or any other caller).

    Parameters
    ----------
    loader / embedder / index / llm:
        Provider implementations.  The same *embedder* serves ingestion
        and question embedding.
    config:
        Pipeline parameters; defaults to the process settings.
    """

    def __init__(
        self,
        *,
        loader: DocumentLoader,
        embedder: EmbeddingProvider,
        index: VectorIndex,
        llm: LanguageModel,
        config: Settings = settings,
    ) -> None:
        self.index = index
        self.ingestion = IngestionPipeline(
            loader,
            embedder,
            index,
            pdf_dir=config.pdf_dir,
            chunk_size=config.chunk_size,
            chunk_overlap=config.chunk_overlap,
            batch_size=config.embed_batch_size,
            max_concurrency=config.embed_max_concurrency,
            file_name_max_length=config.file_name_max_length,
        )
        retriever = SemanticRetriever(
            embedder,
            index,
            default_k=config.top_k,
            score_threshold=config.score_threshold,
        )
        self.qa = QAPipeline(
            retriever,
            llm,
            top_k=config.top_k,
            min_length=config.question_min_length,
            max_length=config.question_max_length,
        )

    @property
    def ready(self) -> bool:
        return self.index.ready

    async def start(self) -> None:
        """Initialise the vector-index handle.  Concurrent calls share one attempt."""
        await self.index.connect()

    async def close(self) -> None:
        await self.index.close()

    async def ingest(self, file_name: str) -> IngestResult:
        self._require_ready()
        return await self.ingestion.ingest(file_name)

    async def answer(self, question: str) -> Answer:
        self._require_ready()
        return await self.qa.answer(question)

    def _require_ready(self) -> None:
        if not self.ready:
            raise NotReadyError()


def build_index(config: Settings = settings) -> VectorIndex:
    """Return the vector index selected by ``vector_backend``."""
    if config.vector_backend == "memory":
        from pdf_qa.retrieval.memory_store import InMemoryVectorIndex

        return InMemoryVectorIndex(config.chroma_collection)

    from pdf_qa.retrieval.chroma_store import ChromaVectorIndex

    return ChromaVectorIndex(
        config.chroma_collection,
        host=config.chroma_host,
        port=config.chroma_port,
        upsert_batch_size=config.upsert_batch_size,
    )


def build_service(config: Settings = settings) -> PdfQAService:
    """Construct a service from configuration using the default adapters."""
    from pdf_qa.ingestion.embedder import build_embedding_provider
    from pdf_qa.qa.llm import ChatLanguageModel, get_llm

    logger.info(
        "Building service: vector_backend=%s embedding=%s/%s llm=%s",
        config.vector_backend,
        config.embedding_backend,
        config.embedding_model,
        config.llm_model_name,
    )
    return PdfQAService(
        loader=PyPDFDocumentLoader(),
        embedder=build_embedding_provider(config),
        index=build_index(config),
        llm=ChatLanguageModel(get_llm(config)),
        config=config,
    )
