"""Retrieval-augmented question answering over a private corpus of PDF documents."""

__version__ = "0.1.0"
