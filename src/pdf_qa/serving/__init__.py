"""
Serving — FastAPI application for the PDF question-answering service.

Run with ``uvicorn pdf_qa.serving.app:app``.
"""
