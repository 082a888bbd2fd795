"""Shared configuration loaded from environment / .env file."""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import Field, model_validator
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application-wide settings, populated from env vars or .env file."""

    # LLM
    openai_api_key: str = Field(default="", description="OpenAI API key (or dummy value for a local endpoint)")
    llm_model_name: str = Field(default="gpt-4o-mini", description="Chat model identifier")
    llm_base_url: str = Field(
        default="",
        description=(
            "Base URL for an OpenAI-compatible chat API. Leave empty to use "
            "OpenAI cloud, e.g. 'http://localhost:8001/v1' for a local vLLM server."
        ),
    )
    llm_temperature: float = 0.9

    # Embedding
    embedding_backend: Literal["huggingface", "openai"] = "huggingface"
    embedding_model: str = "sentence-transformers/all-MiniLM-L6-v2"
    embedding_dimension: int = Field(default=384, gt=0)
    embed_batch_size: int = Field(default=64, gt=0)
    embed_max_concurrency: int = Field(default=5, gt=0)
    embed_max_attempts: int = Field(
        default=1,
        ge=1,
        description="Attempts per embedding batch; values above 1 retry transient provider errors.",
    )

    # Vector store
    vector_backend: Literal["chroma", "memory"] = "chroma"
    chroma_host: str = "localhost"
    chroma_port: int = 8000
    chroma_collection: str = "pdf_qa"
    upsert_batch_size: int = Field(default=5000, gt=0)

    # Documents
    pdf_dir: Path = Path("./pdf")
    file_name_max_length: int = 100
    chunk_size: int = Field(default=1000, gt=0)
    chunk_overlap: int = Field(default=50, ge=0)

    # Question answering
    top_k: int = Field(default=5, gt=0)
    score_threshold: float = 0.0
    question_min_length: int = Field(default=10, ge=1)
    question_max_length: int = Field(
        default=200,
        description="Service-level limit; the HTTP layer separately accepts up to 250 characters.",
    )

    log_level: str = "INFO"

    model_config = {"env_file": ".env", "env_file_encoding": "utf-8"}

    @model_validator(mode="after")
    def _check_bounds(self) -> Settings:
        if self.chunk_overlap >= self.chunk_size:
            raise ValueError(
                f"chunk_overlap ({self.chunk_overlap}) must be < chunk_size ({self.chunk_size})"
            )
        if self.question_min_length > self.question_max_length:
            raise ValueError("question_min_length must not exceed question_max_length")
        return self


# Import `settings` wherever the process-wide defaults are needed.
settings = Settings()
