"""Embedding provider backed by a LangChain ``Embeddings`` model."""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TYPE_CHECKING, Any

from tenacity import AsyncRetrying, before_sleep_log, stop_after_attempt, wait_exponential

from pdf_qa.config import Settings, settings
from pdf_qa.retrieval.base import EmbeddingProvider

if TYPE_CHECKING:
    from langchain_core.embeddings import Embeddings

logger = logging.getLogger(__name__)


def get_embedding_function(config: Settings = settings) -> Embeddings:
    """Return the configured LangChain embedding model."""
    if config.embedding_backend == "openai":
        from langchain_openai import OpenAIEmbeddings

        return OpenAIEmbeddings(model=config.embedding_model, api_key=config.openai_api_key)

    from langchain_huggingface import HuggingFaceEmbeddings

    return HuggingFaceEmbeddings(model_name=config.embedding_model)


class LangChainEmbeddingProvider(EmbeddingProvider):
    """Adapt any LangChain ``Embeddings`` to :class:`EmbeddingProvider`.

    Parameters
    ----------
    embeddings:
        The LangChain embedding model.
    dimension:
        Declared vector length; must match the model.
    max_attempts:
        Attempts per call.  ``1`` (the default) disables retrying.
    retry_wait:
        tenacity wait strategy between attempts.
    """

    def __init__(
        self,
        embeddings: Embeddings,
        dimension: int,
        *,
        max_attempts: int = 1,
        retry_wait: Any = None,
    ) -> None:
        self._embeddings = embeddings
        self._dimension = dimension
        self._max_attempts = max_attempts
        self._retry_wait = retry_wait if retry_wait is not None else wait_exponential(multiplier=1, min=1, max=10)

    @property
    def dimension(self) -> int:
        return self._dimension

    async def embed(self, texts: Sequence[str]) -> list[list[float]]:
        if self._max_attempts <= 1:
            return await self._embeddings.aembed_documents(list(texts))

        async for attempt in AsyncRetrying(
            stop=stop_after_attempt(self._max_attempts),
            wait=self._retry_wait,
            before_sleep=before_sleep_log(logger, logging.WARNING),
            reraise=True,
        ):
            with attempt:
                return await self._embeddings.aembed_documents(list(texts))
        raise AssertionError("unreachable")  # pragma: no cover


def build_embedding_provider(config: Settings = settings) -> LangChainEmbeddingProvider:
    return LangChainEmbeddingProvider(
        get_embedding_function(config),
        config.embedding_dimension,
        max_attempts=config.embed_max_attempts,
    )
