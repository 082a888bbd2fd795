"""Error kinds raised by the ingestion and question-answering pipelines.

Callers branch on the exception class, never on the message.  Messages
are safe to show to an end user: provider payloads and credentials stay
in the chained ``__cause__`` and in the server-side log.

Hierarchy::

    PdfQAError
    ├── ValidationError
    ├── NotFoundError
    ├── LoadError
    └── ServiceError
        ├── EmbeddingError
        │   └── PartialUpsertError
        ├── VectorIndexError
        │   └── NotReadyError
        └── GenerationError
"""

from __future__ import annotations


class PdfQAError(Exception):
    """Base class for every error raised by :mod:`pdf_qa`."""


class ValidationError(PdfQAError):
    """Bad caller input (question length, missing or malformed file name)."""


class NotFoundError(PdfQAError):
    """The referenced document does not exist."""


class LoadError(PdfQAError):
    """The document exists but could not be read or yielded no text."""


class ServiceError(PdfQAError):
    """A provider call or an unexpected internal step failed."""

    default_message = "Internal Server Error"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message or self.default_message)


class EmbeddingError(ServiceError):
    """The embedding provider failed or returned vectors of the wrong shape."""

    default_message = "Embedding provider failed"


class PartialUpsertError(EmbeddingError):
    """Only part of an ingestion batch reached the vector index.

    The index is left in a mixed state; nothing is rolled back.
    """

    def __init__(self, stored_count: int, total: int) -> None:
        self.stored_count = stored_count
        self.total = total
        super().__init__(f"Stored {stored_count} of {total} records before the index rejected the batch")


class VectorIndexError(ServiceError):
    """The vector index is unreachable or an upsert / query failed."""

    default_message = "Vector index unavailable"


class NotReadyError(VectorIndexError):
    """The vector index handle was used before it was initialised."""

    default_message = "Vector index is not initialised"


class GenerationError(ServiceError):
    """The language model failed to produce an answer."""

    default_message = "Language model failed"
