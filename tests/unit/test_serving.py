"""Unit tests for the serving layer."""

from __future__ import annotations

from pathlib import Path

import pytest
from fakes import FakeEmbedder, FakeLLM, FakeLoader
from fastapi.testclient import TestClient

from pdf_qa.config import Settings
from pdf_qa.errors import VectorIndexError
from pdf_qa.ingestion.models import Page
from pdf_qa.retrieval.memory_store import InMemoryVectorIndex
from pdf_qa.serving.app import create_app
from pdf_qa.service import PdfQAService

CLAUSE = "Either party may terminate this agreement with thirty days written notice."
QUESTION = "What is the termination clause?"


class DownIndex(InMemoryVectorIndex):
    async def _open(self) -> None:
        raise VectorIndexError()


class UnreachableIndex(InMemoryVectorIndex):
    async def health_check(self) -> bool:
        return False


def _service(pdf_dir: Path, *, loader: FakeLoader | None = None, llm: FakeLLM | None = None, index=None) -> PdfQAService:  # noqa: ANN001
    return PdfQAService(
        loader=loader or FakeLoader([Page(index=0, text=CLAUSE)]),
        embedder=FakeEmbedder(8),
        index=index or InMemoryVectorIndex(),
        llm=llm or FakeLLM(),
        config=Settings(_env_file=None, pdf_dir=pdf_dir, vector_backend="memory", embedding_dimension=8),
    )


@pytest.fixture()
def client(pdf_dir: Path):
    with TestClient(create_app(_service(pdf_dir))) as c:
        yield c


def test_health_endpoint(client: TestClient) -> None:
    """GET /health should return 200 with status ok."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "ready": True}


def test_load_pdf_returns_chunk_count(client: TestClient) -> None:
    response = client.post("/chat/load-pdf", json={"fileName": "contract.pdf"})
    assert response.status_code == 200
    assert response.json() == {"message": "pdf is loaded", "status": "success", "chunkCount": 1}


def test_ask_question_after_load(client: TestClient) -> None:
    client.post("/chat/load-pdf", json={"fileName": "contract.pdf"})
    response = client.get("/chat/ask-question", params={"question": QUESTION})
    assert response.status_code == 200
    body = response.json()
    assert body["source"] == CLAUSE
    assert body["text"]


def test_ask_question_with_empty_index(client: TestClient) -> None:
    response = client.get("/chat/ask-question", params={"question": QUESTION})
    assert response.status_code == 200
    assert response.json()["source"] == "No source document found"


def test_missing_file_is_a_bad_request(client: TestClient) -> None:
    response = client.post("/chat/load-pdf", json={"fileName": "missing.pdf"})
    assert response.status_code == 400
    assert response.json() == {"statusCode": 400, "message": "File does not exist."}


def test_missing_file_name_is_a_bad_request(client: TestClient) -> None:
    assert client.post("/chat/load-pdf", json={}).status_code == 400


@pytest.mark.parametrize("question", ["too short", "x" * 251])
def test_question_length_is_checked_at_the_boundary(client: TestClient, question: str) -> None:
    response = client.get("/chat/ask-question", params={"question": question})
    assert response.status_code == 400
    assert response.json()["statusCode"] == 400


def test_question_over_service_limit_is_rejected(client: TestClient) -> None:
    response = client.get("/chat/ask-question", params={"question": "x" * 220})
    assert response.status_code == 400
    assert response.json()["message"] == "Text too long"


def test_unreadable_pdf_is_unprocessable(pdf_dir: Path) -> None:
    with TestClient(create_app(_service(pdf_dir, loader=FakeLoader([])))) as c:
        response = c.post("/chat/load-pdf", json={"fileName": "contract.pdf"})
    assert response.status_code == 422


def test_generation_failure_is_generic(pdf_dir: Path) -> None:
    llm = FakeLLM(error=RuntimeError("Incorrect API key provided: sk-live-123"))
    with TestClient(create_app(_service(pdf_dir, llm=llm))) as c:
        response = c.get("/chat/ask-question", params={"question": QUESTION})
    assert response.status_code == 500
    assert "sk-live" not in response.text
    assert response.json()["statusCode"] == 500


def test_unavailable_index_is_service_unavailable(pdf_dir: Path) -> None:
    with TestClient(create_app(_service(pdf_dir, index=DownIndex()))) as c:
        assert c.get("/health").json() == {"status": "ok", "ready": False}
        response = c.get("/chat/ask-question", params={"question": QUESTION})
    assert response.status_code == 503


def test_health_reports_failed_heartbeat(pdf_dir: Path) -> None:
    with TestClient(create_app(_service(pdf_dir, index=UnreachableIndex()))) as c:
        response = c.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok", "ready": False}
