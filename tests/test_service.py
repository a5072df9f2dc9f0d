"""
Tests for RagService - ingestion and question answering end to end.

Everything runs against InMemoryStore with mock or absent providers,
so no API key or database is needed.
"""

import pytest
from unittest.mock import MagicMock

from pdf_rag import RagConfig, RagService
from pdf_rag.core import (
    DimensionMismatchError,
    DocumentRecord,
    DocumentNotFoundError,
    DocumentStatus,
    EmptyQueryError,
    IngestionError,
    InvalidStatusTransition,
    PreconditionError,
)
from pdf_rag.embeddings import MockEmbeddings
from pdf_rag.generation import StaticGenerator
from pdf_rag.storage import InMemoryStore
from pdf_rag.synthesis import NO_DOCUMENTS_SELECTED


REPORT_PAGE = "Revenue was $100 billion in 2023, up 10% year over year."


def make_service(store=None, **kwargs) -> RagService:
    store = store or InMemoryStore()
    return RagService(store, store, **kwargs)


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def service(store):
    return make_service(store, config=RagConfig(last_resort=False))


# ---------------------------------------------------------------------------
# WORKED EXAMPLE
# ---------------------------------------------------------------------------


class TestWorkedExample:
    """One page, one chunk, one question."""

    def test_single_chunk_answer(self, service):
        chunks = service.ingest([REPORT_PAGE], "report.pdf", "doc-1", url="https://files/report.pdf")

        assert len(chunks) == 1
        assert chunks[0].page == 1

        result = service.answer("What was the revenue in 2023?", ["doc-1"])

        assert len(result.sources) == 1
        assert result.sources[0].filename == "report.pdf"
        assert result.sources[0].page == 1
        assert result.sources[0].url == "https://files/report.pdf"
        assert "report.pdf, page 1" in result.answer
        assert result.selected_documents == ["report.pdf"]
        assert result.strategy == "lexical"
        assert result.generated is False

    def test_generated_answer(self, store):
        generator = StaticGenerator("Revenue was $100 billion [report.pdf, page 1].")
        service = make_service(store, generator=generator)
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        result = service.answer("What was the revenue in 2023?", ["doc-1"])

        assert result.generated is True
        assert result.answer == "Revenue was $100 billion [report.pdf, page 1]."
        assert len(result.sources) == 1


# ---------------------------------------------------------------------------
# INGESTION STATE MACHINE
# ---------------------------------------------------------------------------


class TestIngestion:
    def test_completed_with_chunk_count(self, service, store):
        service.ingest([REPORT_PAGE, "", "Cash was $24 billion."], "report.pdf", "doc-1")

        record = store.get_documents(["doc-1"])[0]
        assert record.status is DocumentStatus.COMPLETED
        assert record.total_chunks == 2
        assert [c.page for c in store.get_chunks(["doc-1"])] == [1, 3]

    def test_chunker_failure_marks_failed(self, store):
        chunker = MagicMock()
        chunker.chunk.side_effect = RuntimeError("unreadable page")
        service = make_service(store, chunker=chunker)

        with pytest.raises(IngestionError) as exc_info:
            service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        assert exc_info.value.document_id == "doc-1"
        record = store.get_documents(["doc-1"])[0]
        assert record.status is DocumentStatus.FAILED
        assert record.error_message == "unreadable page"

    def test_persistence_failure_marks_failed(self, store):
        chunk_store = MagicMock()
        chunk_store.put_chunks.side_effect = OSError("disk full")
        service = RagService(chunk_store, store)

        with pytest.raises(IngestionError):
            service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        assert store.get_documents(["doc-1"])[0].status is DocumentStatus.FAILED

    def test_reingest_replaces_chunks(self, service, store):
        service.ingest([REPORT_PAGE, "Page two."], "report.pdf", "doc-1")
        service.ingest(["Only one page now."], "report-v2.pdf", "doc-1")

        record = store.get_documents(["doc-1"])[0]
        assert record.status is DocumentStatus.COMPLETED
        assert record.filename == "report-v2.pdf"
        assert record.total_chunks == 1
        assert [c.content for c in store.get_chunks(["doc-1"])] == ["Only one page now."]

    def test_reingest_after_failure(self, store):
        chunker = MagicMock()
        chunker.chunk.side_effect = RuntimeError("boom")
        with pytest.raises(IngestionError):
            make_service(store, chunker=chunker).ingest([REPORT_PAGE], "report.pdf", "doc-1")

        make_service(store).ingest([REPORT_PAGE], "report.pdf", "doc-1")

        record = store.get_documents(["doc-1"])[0]
        assert record.status is DocumentStatus.COMPLETED
        assert record.error_message is None

    def test_document_already_processing(self, service, store):
        store.add_document(DocumentRecord(id="doc-1", filename="report.pdf", url=""))
        store.update_status("doc-1", DocumentStatus.PROCESSING)

        with pytest.raises(InvalidStatusTransition):
            service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

    def test_chunk_size_override(self, service):
        chunks = service.ingest([REPORT_PAGE], "report.pdf", "doc-1", chunk_size=20)
        assert len(chunks) > 1
        assert all(len(c.content) <= 20 for c in chunks)

    def test_embed_on_ingest(self, store):
        service = make_service(
            store,
            embeddings=MockEmbeddings(),
            config=RagConfig(embed_on_ingest=True),
        )
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        assert all(c.has_embedding for c in store.get_chunks(["doc-1"]))


# ---------------------------------------------------------------------------
# QUESTION ANSWERING
# ---------------------------------------------------------------------------


class TestAnswer:
    def test_blank_query(self, service):
        with pytest.raises(EmptyQueryError):
            service.answer("   ", ["doc-1"])

    def test_no_documents_selected(self, service):
        result = service.answer("anything", [])

        assert result.answer == NO_DOCUMENTS_SELECTED
        assert result.sources == []

    def test_no_match_lists_searched_files(self, service):
        service.ingest(["The weather was sunny."], "notes.pdf", "doc-1")
        service.ingest(["A quiet afternoon."], "diary.pdf", "doc-2")

        result = service.answer("quarterly dividend", ["doc-1", "doc-2"])

        assert result.sources == []
        assert result.selected_documents == ["notes.pdf", "diary.pdf"]
        assert "quarterly dividend" in result.answer

    def test_financial_text_without_query_words_is_no_match(self, service):
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        result = service.answer("zebra", ["doc-1"])

        assert result.sources == []
        assert result.selected_documents == ["report.pdf"]
        assert result.strategy == "none"

    def test_stopwords_alone_do_not_match(self, service):
        service.ingest(["The board met in the spring."], "minutes.pdf", "doc-1")

        assert service.answer("what was the plan", ["doc-1"]).sources == []

    def test_limit_bounds_sources(self, service):
        pages = [f"Revenue note {i}." for i in range(10)]
        service.ingest(pages, "report.pdf", "doc-1")

        assert len(service.answer("revenue", ["doc-1"], limit=3).sources) == 3
        assert len(service.answer("revenue", ["doc-1"]).sources) == 5

    @pytest.mark.parametrize("limit", [0, -1])
    def test_limit_below_one_rejected(self, service, limit):
        with pytest.raises(PreconditionError):
            service.answer("revenue", ["doc-1"], limit=limit)

    def test_vector_strategy(self, store):
        service = make_service(
            store,
            embeddings=MockEmbeddings(),
            config=RagConfig(embed_on_ingest=True),
        )
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        result = service.answer("What was the revenue in 2023?", ["doc-1"])

        assert result.strategy == "vector"
        assert result.sources[0].page == 1

    def test_vector_failure_falls_back_to_lexical(self, store):
        make_service(
            store,
            embeddings=MockEmbeddings(),
            config=RagConfig(embed_on_ingest=True),
        ).ingest([REPORT_PAGE], "report.pdf", "doc-1")

        failing = MagicMock()
        failing.embed.side_effect = RuntimeError("rate limited")
        result = make_service(store, embeddings=failing).answer("revenue 2023", ["doc-1"])

        assert result.strategy == "lexical"
        assert result.sources[0].filename == "report.pdf"

    def test_dimension_mismatch_propagates(self, store):
        make_service(
            store,
            embeddings=MockEmbeddings(dimensions=8),
            config=RagConfig(embed_on_ingest=True),
        ).ingest([REPORT_PAGE], "report.pdf", "doc-1")

        service = make_service(store, embeddings=MockEmbeddings(dimensions=16))

        with pytest.raises(DimensionMismatchError):
            service.answer("revenue", ["doc-1"])

    def test_backfill_after_query(self, store):
        config = RagConfig(backfill_embeddings=True)
        service = make_service(store, embeddings=MockEmbeddings(), config=config)
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        first = service.answer("revenue 2023", ["doc-1"])
        assert first.strategy == "lexical"
        assert all(c.has_embedding for c in store.get_chunks(["doc-1"]))

        second = service.answer("revenue 2023", ["doc-1"])
        assert second.strategy == "vector"


# ---------------------------------------------------------------------------
# DOCUMENT MANAGEMENT
# ---------------------------------------------------------------------------


class TestDocuments:
    def test_delete_cascades(self, service, store):
        service.ingest([REPORT_PAGE, "Cash."], "report.pdf", "doc-1")

        assert service.delete_document("doc-1") == 2
        assert store.get_chunks(["doc-1"]) == []
        assert store.get_documents(["doc-1"]) == []

    def test_delete_unknown(self, service):
        with pytest.raises(DocumentNotFoundError):
            service.delete_document("nope")

    def test_classify_only_completed(self, service, store):
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")
        chunker = MagicMock()
        chunker.chunk.side_effect = RuntimeError("boom")
        with pytest.raises(IngestionError):
            make_service(store, chunker=chunker).ingest(["x"], "broken.pdf", "doc-2")

        classification = service.classify_documents("revenue", ["doc-1", "doc-2"])

        assert classification.documents == ["report.pdf"]
        assert "1 of 2" in classification.reasoning

    def test_list_documents_by_status(self, service):
        service.ingest([REPORT_PAGE], "report.pdf", "doc-1")

        assert [d.id for d in service.list_documents()] == ["doc-1"]
        assert service.list_documents(DocumentStatus.FAILED) == []
