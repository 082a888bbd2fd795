"""Answer model returned by the question-answering pipeline."""

from __future__ import annotations

from pydantic import BaseModel

NO_SOURCE = "No source document found"


class Answer(BaseModel):
    """Generated text plus the single best supporting passage.

    ``source`` is the verbatim text of the top-ranked retrieved chunk, or
    :data:`NO_SOURCE` when nothing was retrieved.
    """

    text: str
    source: str = NO_SOURCE
