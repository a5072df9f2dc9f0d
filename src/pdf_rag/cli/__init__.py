"""
CLI module - command-line interface to RagService.

Provides entry points for:
- Ingesting extracted page text
- Asking questions
- Listing and deleting documents
"""

from pdf_rag.cli.commands import (
    main,
    run_ingest_cli,
    run_ask_cli,
    run_documents_cli,
    run_delete_cli,
)

__all__ = [
    "main",
    "run_ingest_cli",
    "run_ask_cli",
    "run_documents_cli",
    "run_delete_cli",
]
