"""Text chunking with exact, fixed overlap between neighbouring chunks."""

from __future__ import annotations

from typing import Any

from langchain_text_splitters import TextSplitter

from pdf_qa.ingestion.models import Chunk, Page

DEFAULT_SEPARATORS = ["\n\n", "\n", ". ", " ", ""]


class PageTextSplitter(TextSplitter):
    """Split page text into windows of at most ``chunk_size`` characters.

    Each window is cut after the last occurrence of the coarsest separator
    that still leaves more than ``chunk_overlap`` characters in it, falling
    back through finer separators to a raw character cut.  The next window
    starts exactly ``chunk_overlap`` characters before that cut, so every
    chunk is a contiguous substring of the input and neighbours share
    exactly ``chunk_overlap`` characters.

    Parameters
    ----------
    chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of characters shared by consecutive chunks; must be smaller
        than ``chunk_size``.
    separators:
        Split boundaries in priority order.  ``""`` (a character cut) is
        always tried last.
    """

    def __init__(
        self,
        chunk_size: int = 1000,
        chunk_overlap: int = 50,
        separators: list[str] | None = None,
        **kwargs: Any,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError(f"chunk_size must be > 0, got {chunk_size}")
        if chunk_overlap < 0 or chunk_overlap >= chunk_size:
            raise ValueError(
                f"chunk_overlap ({chunk_overlap}) must be >= 0 and < chunk_size ({chunk_size})"
            )
        super().__init__(chunk_size=chunk_size, chunk_overlap=chunk_overlap, length_function=len, **kwargs)
        seps = list(separators) if separators is not None else list(DEFAULT_SEPARATORS)
        if "" not in seps:
            seps.append("")
        self._separators = seps

    def split_text(self, text: str) -> list[str]:
        return [piece for _, piece in self._windows(text)]

    def split_page(self, page: Page, source: str = "") -> list[Chunk]:
        """Chunk one page, attaching provenance to every chunk."""
        return [
            Chunk(text=piece, source=source, page=page.index, offset=offset, chunk_index=i)
            for i, (offset, piece) in enumerate(self._windows(page.text))
        ]

    # -- internals ------------------------------------------------------------

    def _windows(self, text: str) -> list[tuple[int, str]]:
        size = self._chunk_size
        overlap = self._chunk_overlap
        if not text:
            return []
        if len(text) <= size:
            return [(0, text)]

        windows: list[tuple[int, str]] = []
        start = 0
        while start + size < len(text):
            end = start + self._cut(text[start : start + size], overlap)
            windows.append((start, text[start:end]))
            start = end - overlap
        windows.append((start, text[start:]))
        return windows

    def _cut(self, segment: str, overlap: int) -> int:
        """Length of the chunk to take from the front of *segment*."""
        for sep in self._separators:
            # rfind("") is len(segment): the character-cut fallback.
            idx = segment.rfind(sep)
            if idx == -1:
                continue
            cut = idx + len(sep)
            if cut > overlap:
                return cut
        return len(segment)


def split(
    text: str,
    max_chunk_size: int,
    chunk_overlap: int,
    *,
    source: str = "",
    page: int = 0,
) -> list[Chunk]:
    """Split *text* into overlapping, size-bounded chunks.

    Parameters
    ----------
    text:
        Raw page text.
    max_chunk_size:
        Maximum number of characters per chunk.
    chunk_overlap:
        Number of overlapping characters between consecutive chunks.
    source / page:
        Provenance recorded on every chunk.

    Returns
    -------
    list[Chunk]
        Chunks in text order; empty for empty input.
    """
    splitter = PageTextSplitter(chunk_size=max_chunk_size, chunk_overlap=chunk_overlap)
    return splitter.split_page(Page(index=page, text=text), source=source)
