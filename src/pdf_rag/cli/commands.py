"""
CLI commands - thin wrappers around RagService.

Each command follows a consistent pattern:
1. Parse arguments
2. Build the service from RagConfig
3. Run the operation
4. Print results
5. Return exit code

Page text is read from a plain text file with one form feed (\\f) between
pages, which is what `pdftotext` produces.
"""

from __future__ import annotations

import argparse
import json
import logging
import os
import sys
from pathlib import Path

from pdf_rag.config import RagConfig
from pdf_rag.core.errors import RagError
from pdf_rag.core.models import DocumentStatus

PAGE_SEPARATOR = "\f"


def _load_env() -> None:
    """Load environment variables from .env file."""
    from dotenv import load_dotenv

    load_dotenv()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _cli_config() -> RagConfig:
    """RagConfig from env; the CLI defaults to the JSON file store so state persists."""
    config = RagConfig.from_env()
    if "RAG_STORE" not in os.environ:
        config.store_backend = "file"
    return config


def build_service(config: RagConfig | None = None):
    """Wire a RagService from configuration."""
    from pdf_rag.embeddings import get_embedding_provider
    from pdf_rag.generation import get_generation_provider
    from pdf_rag.observability import init_phoenix
    from pdf_rag.service import RagService
    from pdf_rag.storage import get_store

    config = config or _cli_config()
    init_phoenix()

    store = get_store(
        config.store_backend,
        path=config.store_path,
        database_url=config.database_url,
    )
    return RagService(
        chunk_store=store,
        document_store=store,
        embeddings=get_embedding_provider(model=config.embedding_model),
        generator=get_generation_provider(model=config.generation_model),
        config=config,
    )


def read_pages(path: str | Path) -> list[str]:
    """Split a text file into pages on form feeds."""
    text = Path(path).read_text(encoding="utf-8")
    pages = text.split(PAGE_SEPARATOR)
    # pdftotext ends the last page with a form feed too
    if len(pages) > 1 and not pages[-1].strip():
        pages = pages[:-1]
    return pages


def run_ingest_cli() -> int:
    """CLI entry point for ingestion."""
    parser = argparse.ArgumentParser(description="Chunk and store a document's page text")
    parser.add_argument("path", help="Text file, pages separated by form feeds")
    parser.add_argument("--document-id", required=True, help="Document id")
    parser.add_argument("--filename", help="Display filename (default: the file's name)")
    parser.add_argument("--url", default="", help="Public URL of the original PDF")
    parser.add_argument("--chunk-size", type=int, help="Max characters per chunk")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    _configure_logging(args.verbose)
    service = build_service()

    pages = read_pages(args.path)
    filename = args.filename or Path(args.path).with_suffix(".pdf").name

    try:
        chunks = service.ingest(pages, filename, args.document_id, args.url, args.chunk_size)
    except RagError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Ingested {filename}: {len(chunks)} chunks from {len(pages)} pages")
    return 0


def run_ask_cli() -> int:
    """CLI entry point for question answering."""
    parser = argparse.ArgumentParser(description="Ask a question about ingested documents")
    parser.add_argument("query", help="Question")
    parser.add_argument(
        "--document-id",
        action="append",
        default=[],
        dest="document_ids",
        help="Document to search (repeatable)",
    )
    parser.add_argument("--limit", type=int, help="Number of chunks to use")
    parser.add_argument("--json", action="store_true", help="Print the full result as JSON")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    _configure_logging(args.verbose)
    service = build_service()

    try:
        result = service.answer(args.query, args.document_ids, limit=args.limit)
    except RagError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    if args.json:
        print(json.dumps(result.model_dump(), ensure_ascii=False, indent=2))
        return 0

    print(result.answer)
    if result.sources:
        print("\nSources:")
        for source in result.sources:
            print(f"  - {source.filename}, page {source.page}")
    return 0


def run_documents_cli() -> int:
    """CLI entry point for listing documents."""
    parser = argparse.ArgumentParser(description="List ingested documents")
    parser.add_argument(
        "--status",
        choices=[s.value for s in DocumentStatus],
        help="Only documents in this status",
    )
    args = parser.parse_args()

    service = build_service()
    status = DocumentStatus(args.status) if args.status else None
    documents = service.list_documents(status)

    if not documents:
        print("No documents")
        return 0

    for doc in documents:
        line = f"  [{doc.status.value:<10}] {doc.id}  {doc.filename}  ({doc.total_chunks} chunks)"
        if doc.error_message:
            line += f"  error: {doc.error_message}"
        print(line)
    return 0


def run_delete_cli() -> int:
    """CLI entry point for deleting a document and its chunks."""
    parser = argparse.ArgumentParser(description="Delete a document and its chunks")
    parser.add_argument("--document-id", required=True, help="Document id")
    args = parser.parse_args()

    service = build_service()
    try:
        removed = service.delete_document(args.document_id)
    except RagError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1

    print(f"Deleted {args.document_id} ({removed} chunks)")
    return 0


def main() -> int:
    """
    Main CLI entry point with subcommands.

    Usage:
        pdf-rag ingest report.txt --document-id 1
        pdf-rag ask "What was the revenue in 2023?" --document-id 1
        pdf-rag documents --status completed
        pdf-rag delete --document-id 1
    """
    _load_env()

    parser = argparse.ArgumentParser(
        description="Question answering over uploaded PDF documents",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  ingest      Chunk and store extracted page text
  ask         Answer a question with cited sources
  documents   List documents and their status
  delete      Delete a document and its chunks

Environment:
  OPENAI_API_KEY   enables vector search and generated answers
  RAG_STORE        memory | file | postgres (CLI default: file)
        """,
    )

    parser.add_argument(
        "command",
        choices=["ingest", "ask", "documents", "delete"],
        help="Operation to run",
    )

    # Parse just the command first
    args, remaining = parser.parse_known_args()

    commands = {
        "ingest": run_ingest_cli,
        "ask": run_ask_cli,
        "documents": run_documents_cli,
        "delete": run_delete_cli,
    }

    # Re-inject remaining args for the subcommand
    sys.argv = [sys.argv[0]] + remaining

    try:
        return commands[args.command]()
    except KeyboardInterrupt:
        print("\nInterrupted")
        return 130


if __name__ == "__main__":
    sys.exit(main())
