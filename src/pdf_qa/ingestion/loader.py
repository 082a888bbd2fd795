"""Document loading — file-name resolution and PDF text extraction."""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from pathlib import Path

from langchain_community.document_loaders import PyPDFLoader
from pypdf.errors import PyPdfError

from pdf_qa.errors import LoadError, NotFoundError, ValidationError
from pdf_qa.ingestion.models import Page

logger = logging.getLogger(__name__)


class DocumentLoader(ABC):
    """Turns a document location into its ordered pages."""

    @abstractmethod
    async def load(self, location: Path) -> list[Page]:
        """Extract per-page text from *location*.

        Raises
        ------
        LoadError
            The content is malformed or unreadable.
        """
        ...


class PyPDFDocumentLoader(DocumentLoader):
    """Load a PDF with LangChain's ``PyPDFLoader``, one :class:`Page` per PDF page."""

    async def load(self, location: Path) -> list[Page]:
        try:
            documents = await PyPDFLoader(str(location)).aload()
        except (PyPdfError, OSError, ValueError) as exc:
            logger.exception("Failed to read PDF %s", location)
            raise LoadError(f"Could not read PDF {location.name!r}") from exc

        pages = [
            Page(index=int(doc.metadata.get("page", i)), text=doc.page_content)
            for i, doc in enumerate(documents)
        ]
        logger.info("Loaded pdf %s with %d page(s)", location.name, len(pages))
        return pages


def resolve_document(file_name: str, pdf_dir: str | Path, *, max_length: int = 100) -> Path:
    """Map a caller-supplied file name to a path inside *pdf_dir*.

    Only bare file names are accepted; anything that would escape
    *pdf_dir* is rejected.

    Raises
    ------
    ValidationError
        *file_name* is empty, too long, or contains path components.
    NotFoundError
        No such file exists in *pdf_dir*.
    """
    if not file_name or not file_name.strip():
        raise ValidationError("Missing file name")
    if len(file_name) > max_length:
        raise ValidationError(f"File name longer than {max_length} characters")
    if Path(file_name).name != file_name or file_name in (".", "..") or "\\" in file_name:
        raise ValidationError("File name must not contain path components")

    location = Path(pdf_dir) / file_name
    if not location.is_file():
        raise NotFoundError("File does not exist.")
    return location
