"""
QA — retrieval-augmented answering over the ingested PDFs.

Public API
----------
- :class:`QAPipeline` — validate, retrieve, generate, shape the answer.
- :class:`Answer` — ``text`` plus the single best ``source`` passage.
- :class:`LanguageModel` / :class:`ChatLanguageModel` — generation backends.
"""

from pdf_qa.qa.llm import ChatLanguageModel, LanguageModel
from pdf_qa.qa.models import NO_SOURCE, Answer
from pdf_qa.qa.pipeline import QAPipeline, validate_question

__all__ = [
    "NO_SOURCE",
    "Answer",
    "ChatLanguageModel",
    "LanguageModel",
    "QAPipeline",
    "validate_question",
]
