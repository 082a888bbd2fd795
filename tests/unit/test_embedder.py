"""Unit tests for the LangChain embedding adapter."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from langchain_core.embeddings import DeterministicFakeEmbedding, Embeddings
from tenacity import wait_none

from pdf_qa.config import Settings
from pdf_qa.ingestion.embedder import (
    LangChainEmbeddingProvider,
    build_embedding_provider,
    get_embedding_function,
)


class FlakyEmbeddings(Embeddings):
    """Fails the first *failures* calls, then returns constant vectors."""

    def __init__(self, failures: int) -> None:
        self.failures = failures
        self.calls = 0

    def embed_documents(self, texts: list[str]) -> list[list[float]]:
        self.calls += 1
        if self.calls <= self.failures:
            raise ConnectionError("transient")
        return [[0.5, 0.5] for _ in texts]

    def embed_query(self, text: str) -> list[float]:
        return self.embed_documents([text])[0]


class TestLangChainEmbeddingProvider:
    @pytest.mark.asyncio
    async def test_embeds_in_order_with_declared_dimension(self) -> None:
        provider = LangChainEmbeddingProvider(DeterministicFakeEmbedding(size=16), 16)
        vectors = await provider.embed(["alpha", "beta", "alpha"])
        assert provider.dimension == 16
        assert len(vectors) == 3
        assert all(len(v) == 16 for v in vectors)
        assert vectors[0] == vectors[2]

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self) -> None:
        flaky = FlakyEmbeddings(failures=1)
        provider = LangChainEmbeddingProvider(flaky, 2)
        with pytest.raises(ConnectionError):
            await provider.embed(["x"])
        assert flaky.calls == 1

    @pytest.mark.asyncio
    async def test_bounded_retries_when_configured(self) -> None:
        flaky = FlakyEmbeddings(failures=2)
        provider = LangChainEmbeddingProvider(flaky, 2, max_attempts=3, retry_wait=wait_none())
        assert await provider.embed(["x"]) == [[0.5, 0.5]]
        assert flaky.calls == 3

    @pytest.mark.asyncio
    async def test_retries_give_up_and_reraise(self) -> None:
        flaky = FlakyEmbeddings(failures=5)
        provider = LangChainEmbeddingProvider(flaky, 2, max_attempts=2, retry_wait=wait_none())
        with pytest.raises(ConnectionError):
            await provider.embed(["x"])
        assert flaky.calls == 2


class TestFactories:
    def test_huggingface_is_default(self) -> None:
        config = Settings(_env_file=None)
        with patch("langchain_huggingface.HuggingFaceEmbeddings") as hf:
            get_embedding_function(config)
        hf.assert_called_once_with(model_name=config.embedding_model)

    def test_openai_backend(self) -> None:
        config = Settings(_env_file=None, embedding_backend="openai", embedding_model="text-embedding-3-small")
        with patch("langchain_openai.OpenAIEmbeddings") as oa:
            get_embedding_function(config)
        assert oa.call_args.kwargs["model"] == "text-embedding-3-small"

    def test_build_embedding_provider_uses_settings(self) -> None:
        config = Settings(_env_file=None, embedding_dimension=12, embed_max_attempts=3)
        with patch("pdf_qa.ingestion.embedder.get_embedding_function", return_value=DeterministicFakeEmbedding(size=12)):
            provider = build_embedding_provider(config)
        assert provider.dimension == 12
        assert provider._max_attempts == 3
