"""Fixtures shared by the unit tests."""

from __future__ import annotations

from pathlib import Path

import pytest
from fakes import FakeEmbedder, FakeLLM


@pytest.fixture()
def embedder() -> FakeEmbedder:
    return FakeEmbedder()


@pytest.fixture()
def llm() -> FakeLLM:
    return FakeLLM()


@pytest.fixture()
def pdf_dir(tmp_path: Path) -> Path:
    """Directory holding a placeholder ``contract.pdf``."""
    directory = tmp_path / "pdf"
    directory.mkdir()
    (directory / "contract.pdf").write_bytes(b"%PDF-1.4 placeholder")
    return directory
