"""Language-model interface and chat-model adapter — single place to swap providers.

Supports two modes:

1. **OpenAI cloud** (default) — set ``OPENAI_API_KEY``.
2. **OpenAI-compatible endpoint** — set ``LLM_BASE_URL`` to, for
   example, a local vLLM server exposing ``/v1/chat/completions``, so
   ``ChatOpenAI`` works unchanged.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Sequence
from typing import TYPE_CHECKING

from langchain_openai import ChatOpenAI

from pdf_qa.config import Settings, settings

if TYPE_CHECKING:
    from langchain_core.language_models import BaseChatModel
    from langchain_core.messages import BaseMessage

logger = logging.getLogger(__name__)


class LanguageModel(ABC):
    """Generates an answer from a prompt and its grounding context."""

    @abstractmethod
    async def generate(self, prompt: Sequence[BaseMessage], context: Sequence[str]) -> str:
        """Return the generated text.

        Parameters
        ----------
        prompt:
            Chat messages already combining instructions, context and question.
        context:
            The grounding passages, highest similarity first.  Provided
            separately for models that accept documents natively.
        """
        ...


class ChatLanguageModel(LanguageModel):
    """Adapt a LangChain chat model to :class:`LanguageModel`."""

    def __init__(self, chat_model: BaseChatModel) -> None:
        self._chat_model = chat_model

    async def generate(self, prompt: Sequence[BaseMessage], context: Sequence[str]) -> str:
        logger.debug("Generating answer with %d context passage(s)", len(context))
        response = await self._chat_model.ainvoke(list(prompt))
        content = response.content
        if isinstance(content, list):
            content = "".join(part if isinstance(part, str) else part.get("text", "") for part in content)
        return content


def get_llm(config: Settings = settings) -> ChatOpenAI:
    """Return the configured chat model.

    When ``llm_base_url`` is set the client is pointed at that endpoint
    instead of the OpenAI cloud API.  A dummy API key (``"EMPTY"``) is
    used when none is configured because local servers do not require
    authentication.
    """
    kwargs: dict = {
        "model": config.llm_model_name,
        "temperature": config.llm_temperature,
    }

    if config.llm_base_url:
        logger.info("Using OpenAI-compatible endpoint: %s", config.llm_base_url)
        kwargs["base_url"] = config.llm_base_url
        # Local servers don't need a real key; LangChain requires a non-empty value.
        kwargs["api_key"] = config.openai_api_key or "EMPTY"
    else:
        kwargs["api_key"] = config.openai_api_key

    return ChatOpenAI(**kwargs)
