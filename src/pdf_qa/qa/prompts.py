"""Prompt templates for grounded question answering.

Keeping prompts in one place makes them easy to audit, version, and A/B
test.
"""

from __future__ import annotations

from collections.abc import Sequence

from langchain_core.messages import BaseMessage, HumanMessage, SystemMessage

QA_SYSTEM = """\
You are a helpful assistant that answers questions about a private
collection of PDF documents.

Use the following pieces of context to answer the question at the end.
If the context does not contain the answer, say that you don't know;
do not try to make up an answer.  Be concise.
"""

NO_CONTEXT_NOTE = "(No matching passages were found in the documents.)"


def build_qa_prompt(question: str, context: Sequence[str]) -> list[BaseMessage]:
    """Assemble the prompt messages for one retrieval-augmented answer.

    Parameters
    ----------
    question:
        The user question.
    context:
        Retrieved passages, highest similarity first.  May be empty.

    Returns
    -------
    list[BaseMessage]
        LangChain message objects ready for ``.ainvoke()``.
    """
    formatted = _format_context(context) if context else NO_CONTEXT_NOTE
    user_msg = f"Context:\n{formatted}\n\nQuestion: {question}\nHelpful answer:"
    return [
        SystemMessage(content=QA_SYSTEM),
        HumanMessage(content=user_msg),
    ]


def _format_context(context: Sequence[str]) -> str:
    """Numbered listing, in the order given."""
    return "\n\n---\n\n".join(f"[{i}] {passage}" for i, passage in enumerate(context, 1))
