"""Retrieval-QA pipeline — question → retrieval → grounded generation.

Validation happens before any provider is touched.  Provider failures are
logged in full and surfaced as :class:`~pdf_qa.errors.ServiceError`
subclasses with generic messages; a question with no matching passages
is answered without grounding rather than treated as an error.
"""

from __future__ import annotations

import logging

from pdf_qa.errors import GenerationError, PdfQAError, ServiceError, ValidationError
from pdf_qa.qa.llm import LanguageModel
from pdf_qa.qa.models import NO_SOURCE, Answer
from pdf_qa.qa.prompts import build_qa_prompt
from pdf_qa.retrieval.models import RetrievalResult
from pdf_qa.retrieval.retriever import SemanticRetriever

logger = logging.getLogger(__name__)


def validate_question(question: str | None, *, min_length: int = 10, max_length: int = 200) -> str:
    """Return *question* if its length is within bounds, else raise ``ValidationError``."""
    if question is None or not question.strip():
        raise ValidationError("Missing text")
    if len(question) > max_length:
        raise ValidationError("Text too long")
    if len(question) < min_length:
        raise ValidationError(f"Text must be at least {min_length} characters")
    return question


class QAPipeline:
    """Answer questions from the documents stored in the vector index.

    Parameters
    ----------
    retriever:
        Read-only access to the index through the shared embedding provider.
    llm:
        The language model used for generation.
    top_k:
        Passages retrieved as grounding context.
    min_length / max_length:
        Accepted question length, inclusive.
    """

    def __init__(
        self,
        retriever: SemanticRetriever,
        llm: LanguageModel,
        *,
        top_k: int = 5,
        min_length: int = 10,
        max_length: int = 200,
    ) -> None:
        self._retriever = retriever
        self._llm = llm
        self.top_k = top_k
        self.min_length = min_length
        self.max_length = max_length

    async def answer(self, question: str) -> Answer:
        """Answer *question*, citing the best-matching passage as ``source``."""
        question = validate_question(question, min_length=self.min_length, max_length=self.max_length)
        try:
            results = await self.retrieve(question)
            context = [r.content for r in results]
            text = await self._generate(question, context)
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Unexpected failure while answering")
            raise ServiceError() from exc

        source = results[0].content if results else NO_SOURCE
        return Answer(text=text, source=source)

    async def retrieve(self, question: str) -> list[RetrievalResult]:
        """Top-``k`` passages for *question*, highest similarity first."""
        results = await self._retriever.search(question, k=self.top_k)
        if results:
            logger.info("Retrieved %d passage(s): %s", len(results), [r.citation.short_ref() for r in results])
        else:
            logger.info("No passages found; answering without grounding")
        return results

    async def _generate(self, question: str, context: list[str]) -> str:
        prompt = build_qa_prompt(question, context)
        try:
            return await self._llm.generate(prompt, context)
        except PdfQAError:
            raise
        except Exception as exc:
            logger.exception("Language model call failed")
            raise GenerationError() from exc
