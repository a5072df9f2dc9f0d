"""
RagService - the operations the engine exposes to a UI or CLI.

- ingest():   page texts -> chunks, persisted, document status driven
              pending -> processing -> completed | failed
- answer():   query + selected documents -> RagResult (via the LangGraph
              answer pipeline)
- delete_document(), classify_documents(), list_documents()

Every collaborator is injected. Nothing here talks to a concrete database
or API client, so tests run against InMemoryStore and test doubles.

ERROR CONTRACT:
---------------
- Blank query, bad status transitions, dimension mismatches: raised
- Missing/failed providers: never raised, they select a fallback
- No documents, no chunks, no matches: a RagResult explaining why
- Chunking or persistence failures in ingest(): document -> FAILED,
  then IngestionError. Chunks already written are not rolled back.
"""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np

from pdf_rag.chunking.chunker import TextChunker
from pdf_rag.config import RagConfig
from pdf_rag.core.errors import (
    DocumentNotFoundError,
    EmptyQueryError,
    IngestionError,
    PreconditionError,
)
from pdf_rag.core.models import Chunk, DocumentRecord, DocumentStatus
from pdf_rag.core.protocols import (
    ChunkStore,
    DocumentStore,
    EmbeddingProvider,
    GenerationProvider,
)
from pdf_rag.observability import (
    RAG_DOCUMENT_STATUS,
    RAG_INGEST_CHUNK_COUNT,
    get_config as get_phoenix_config,
    get_tracer,
    ingest_attributes,
    query_attributes,
)
from pdf_rag.pipeline.graph import build_answer_graph
from pdf_rag.pipeline.state import create_initial_state
from pdf_rag.retrieval.orchestrator import RetrievalOrchestrator
from pdf_rag.schemas.results import DocumentClassification, RagResult
from pdf_rag.synthesis.synthesizer import AnswerSynthesizer

logger = logging.getLogger(__name__)


class RagService:
    """
    Ingestion and question answering over uploaded documents.

    Args:
        chunk_store: Chunk persistence
        document_store: Document metadata + status persistence
        embeddings: Optional embedding provider (None = lexical only)
        generator: Optional generation provider (None = template answers)
        config: Runtime settings
        chunker: Optional chunker override (defaults to config.chunk_size)
    """

    def __init__(
        self,
        chunk_store: ChunkStore,
        document_store: DocumentStore,
        embeddings: EmbeddingProvider | None = None,
        generator: GenerationProvider | None = None,
        config: RagConfig | None = None,
        chunker: TextChunker | None = None,
    ):
        self.config = config or RagConfig()
        self.chunk_store = chunk_store
        self.document_store = document_store
        self._embeddings = embeddings
        self._chunker = chunker or TextChunker(self.config.chunk_size)

        self.orchestrator = RetrievalOrchestrator.from_config(embeddings, self.config, chunk_store)
        self.synthesizer = AnswerSynthesizer(generator)
        self._graph = build_answer_graph(chunk_store, self.orchestrator, self.synthesizer)

    # ------------------------------------------------------------------
    # INGESTION
    # ------------------------------------------------------------------

    def ingest(
        self,
        page_texts: Sequence[str],
        filename: str,
        document_id: str,
        url: str = "",
        chunk_size: int | None = None,
    ) -> list[Chunk]:
        """
        Chunk a document's pages and persist the chunks.

        An unknown document is registered as PENDING first. A completed or
        failed document is restarted: its old chunks are deleted and it
        goes through the status machine again.

        Raises:
            InvalidStatusTransition: the document is already processing
            IngestionError: chunking or persistence failed (document is FAILED)
        """
        tracer = get_tracer()
        with tracer.start_span("rag.ingest", attributes=ingest_attributes(document_id, len(page_texts))) as span:
            self._prepare_document(page_texts, filename, document_id, url)
            self.document_store.update_status(document_id, DocumentStatus.PROCESSING)

            try:
                chunker = TextChunker(chunk_size) if chunk_size is not None else self._chunker
                chunks = chunker.chunk(page_texts, filename, document_id, url)
                if self.config.embed_on_ingest:
                    chunks = self._embed_chunks(chunks)
                self.chunk_store.put_chunks(chunks)
            except Exception as e:
                message = str(e) or type(e).__name__
                logger.error("Ingestion of %s (%s) failed: %s", filename, document_id, message)
                self.document_store.update_status(
                    document_id, DocumentStatus.FAILED, error_message=message
                )
                span.set_attribute(RAG_DOCUMENT_STATUS, DocumentStatus.FAILED.value)
                span.record_exception(e)
                raise IngestionError(document_id, message) from e

            self.document_store.update_status(
                document_id, DocumentStatus.COMPLETED, total_chunks=len(chunks)
            )
            span.set_attribute(RAG_DOCUMENT_STATUS, DocumentStatus.COMPLETED.value)
            span.set_attribute(RAG_INGEST_CHUNK_COUNT, len(chunks))

        logger.info("Ingested %s: %d chunks from %d pages", filename, len(chunks), len(page_texts))
        return chunks

    def _prepare_document(
        self,
        page_texts: Sequence[str],
        filename: str,
        document_id: str,
        url: str,
    ) -> None:
        existing = self.document_store.get_documents([document_id])
        if not existing:
            self.document_store.add_document(
                DocumentRecord(
                    id=document_id,
                    filename=filename,
                    url=url,
                    size=sum(len(p) for p in page_texts),
                )
            )
            return

        record = existing[0]
        if record.status.is_terminal:
            logger.info("Re-ingesting %s (was %s)", document_id, record.status.value)
            self.chunk_store.delete_chunks(document_id)
            record.restart()
            record.filename = filename
            record.url = url
            record.size = sum(len(p) for p in page_texts)
            self.document_store.add_document(record)

    def _embed_chunks(self, chunks: list[Chunk]) -> list[Chunk]:
        """Attach embeddings when a provider is available. Provider failures keep the chunks bare."""
        if self._embeddings is None or not chunks:
            return chunks
        try:
            vectors = self._embeddings.embed_batch([c.content for c in chunks])
        except Exception as e:
            logger.warning("Embedding during ingestion skipped: %s", e)
            return chunks
        return [c.with_embedding(np.asarray(v)) for c, v in zip(chunks, vectors)]

    # ------------------------------------------------------------------
    # QUESTION ANSWERING
    # ------------------------------------------------------------------

    def answer(self, query: str, document_ids: Sequence[str], limit: int | None = None) -> RagResult:
        """
        Answer a question from the selected documents.

        Raises:
            EmptyQueryError: query is blank
            PreconditionError: limit below 1, or mismatched embedding dimensions
        """
        if not query or not query.strip():
            raise EmptyQueryError("Query must not be empty")

        if limit is None:
            limit = self.config.default_limit
        if limit < 1:
            raise PreconditionError(f"limit must be at least 1, got {limit}")
        tracer = get_tracer()
        attrs = query_attributes(
            query, len(document_ids), limit, get_phoenix_config().capture_content
        )
        with tracer.start_span("rag.answer", attributes=attrs):
            state = self._graph.invoke(create_initial_state(query.strip(), list(document_ids), limit))

        result: RagResult = state["result"]
        logger.info(
            "Answered with %d sources via %s", len(result.sources), result.strategy or "none"
        )
        return result

    # ------------------------------------------------------------------
    # DOCUMENT MANAGEMENT
    # ------------------------------------------------------------------

    def delete_document(self, document_id: str) -> int:
        """
        Delete a document and, first, all of its chunks.

        Returns:
            Number of chunks removed

        Raises:
            DocumentNotFoundError: unknown document id
        """
        if not self.document_store.get_documents([document_id]):
            raise DocumentNotFoundError(f"Unknown document: {document_id}")

        removed = self.chunk_store.delete_chunks(document_id)
        self.document_store.delete_document(document_id)
        logger.info("Deleted document %s and %d chunks", document_id, removed)
        return removed

    def classify_documents(self, query: str, document_ids: Sequence[str]) -> DocumentClassification:
        """Which selected documents are searchable (completed), with a readable summary."""
        documents = self.document_store.get_documents(list(document_ids), status=DocumentStatus.COMPLETED)

        lines = [
            "Answering from chunks extracted from the uploaded PDFs:",
            f'- Question: "{query}"',
            f"- Searchable PDFs: {len(documents)} of {len(document_ids)} selected",
        ]
        lines += [f"- {doc.filename} ({doc.total_chunks} chunks)" for doc in documents]

        return DocumentClassification(
            documents=[doc.filename for doc in documents],
            reasoning="\n".join(lines),
        )

    def list_documents(self, status: DocumentStatus | None = None) -> list[DocumentRecord]:
        return self.document_store.list_documents(status)
