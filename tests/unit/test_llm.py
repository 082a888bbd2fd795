"""Unit tests for the chat-model adapter and its factory."""

from __future__ import annotations

from unittest.mock import patch

import pytest
from langchain_core.language_models import FakeListChatModel

from pdf_qa.config import Settings
from pdf_qa.qa.llm import ChatLanguageModel, get_llm
from pdf_qa.qa.prompts import build_qa_prompt


class TestChatLanguageModel:
    @pytest.mark.asyncio
    async def test_returns_model_content(self) -> None:
        model = ChatLanguageModel(FakeListChatModel(responses=["Thirty days notice."]))
        prompt = build_qa_prompt("What is the notice period?", ["Notice is thirty days."])
        assert await model.generate(prompt, ["Notice is thirty days."]) == "Thirty days notice."


class TestGetLLM:
    def test_openai_cloud_by_default(self) -> None:
        config = Settings(_env_file=None, openai_api_key="sk-test")
        with patch("pdf_qa.qa.llm.ChatOpenAI") as chat:
            get_llm(config)
        chat.assert_called_once_with(model="gpt-4o-mini", temperature=0.9, api_key="sk-test")

    def test_compatible_endpoint_uses_dummy_key(self) -> None:
        config = Settings(_env_file=None, llm_base_url="http://localhost:8001/v1")
        with patch("pdf_qa.qa.llm.ChatOpenAI") as chat:
            get_llm(config)
        kwargs = chat.call_args.kwargs
        assert kwargs["base_url"] == "http://localhost:8001/v1"
        assert kwargs["api_key"] == "EMPTY"
