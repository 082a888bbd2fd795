"""
Ingestion — PDF loading, chunking, and embedding into the vector index.

This package is the write side of the system: it converts a PDF from the
configured directory into embedded chunks stored in a vector index.
"""
