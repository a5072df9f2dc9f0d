"""
Unit Tests for Domain Models

Covers chunk invariants, serialization and the document status machine.
"""

import pytest

from pdf_rag.core import (
    STATUS_TRANSITIONS,
    Chunk,
    DocumentRecord,
    DocumentStatus,
    InvalidStatusTransition,
    can_transition,
)


def make_chunk(**overrides) -> Chunk:
    fields = dict(
        id="chunk_d_1_0",
        document_id="d",
        content="Revenue was $100 billion.",
        page=1,
        source_url="https://files/r.pdf",
        filename="r.pdf",
    )
    fields.update(overrides)
    return Chunk(**fields)


# ---------------------------------------------------------------------------
# CHUNK
# ---------------------------------------------------------------------------


class TestChunk:
    """Test the Chunk value object."""

    def test_page_must_be_positive(self):
        with pytest.raises(ValueError):
            make_chunk(page=0)

    def test_is_frozen(self):
        chunk = make_chunk()
        with pytest.raises(Exception):
            chunk.content = "changed"

    def test_with_embedding_returns_new_chunk(self):
        chunk = make_chunk()
        embedded = chunk.with_embedding([0.5, 0.25])

        assert chunk.embedding is None
        assert not chunk.has_embedding
        assert embedded.embedding == (0.5, 0.25)
        assert embedded.has_embedding
        assert embedded.id == chunk.id

    def test_dict_round_trip(self):
        chunk = make_chunk(section="Page 1").with_embedding([1.0, 2.0])
        assert Chunk.from_dict(chunk.to_dict()) == chunk

    def test_from_dict_defaults(self):
        chunk = Chunk.from_dict({"id": "c", "document_id": 3, "content": "x", "page": None})

        assert chunk.document_id == "3"
        assert chunk.page == 1
        assert chunk.filename == "Unknown"


# ---------------------------------------------------------------------------
# STATUS MACHINE
# ---------------------------------------------------------------------------


class TestStatusTransitions:
    """Test the transition table."""

    @pytest.mark.parametrize(
        "current,requested",
        [
            (DocumentStatus.PENDING, DocumentStatus.PROCESSING),
            (DocumentStatus.PROCESSING, DocumentStatus.COMPLETED),
            (DocumentStatus.PROCESSING, DocumentStatus.FAILED),
        ],
    )
    def test_allowed(self, current, requested):
        assert can_transition(current, requested)

    @pytest.mark.parametrize(
        "current,requested",
        [
            (DocumentStatus.PENDING, DocumentStatus.COMPLETED),
            (DocumentStatus.PENDING, DocumentStatus.FAILED),
            (DocumentStatus.PROCESSING, DocumentStatus.PROCESSING),
            (DocumentStatus.COMPLETED, DocumentStatus.PROCESSING),
            (DocumentStatus.FAILED, DocumentStatus.PROCESSING),
        ],
    )
    def test_forbidden(self, current, requested):
        assert not can_transition(current, requested)

    def test_terminal_states_have_no_exits(self):
        assert STATUS_TRANSITIONS[DocumentStatus.COMPLETED] == frozenset()
        assert STATUS_TRANSITIONS[DocumentStatus.FAILED] == frozenset()
        assert DocumentStatus.COMPLETED.is_terminal
        assert not DocumentStatus.PROCESSING.is_terminal


class TestDocumentRecord:
    """Test DocumentRecord state changes."""

    def test_success_path(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="")
        record.transition_to(DocumentStatus.PROCESSING)
        record.transition_to(DocumentStatus.COMPLETED, total_chunks=12)

        assert record.status is DocumentStatus.COMPLETED
        assert record.total_chunks == 12
        assert record.error_message is None

    def test_failure_carries_message(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="", status=DocumentStatus.PROCESSING)
        record.transition_to(DocumentStatus.FAILED, error_message="no text layer")

        assert record.status is DocumentStatus.FAILED
        assert record.error_message == "no text layer"

    def test_failure_without_message_gets_default(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="", status=DocumentStatus.PROCESSING)
        record.transition_to(DocumentStatus.FAILED)
        assert record.error_message

    def test_illegal_transition_raises(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="", status=DocumentStatus.COMPLETED)

        with pytest.raises(InvalidStatusTransition) as exc_info:
            record.transition_to(DocumentStatus.PROCESSING)

        assert exc_info.value.current == "completed"
        assert record.status is DocumentStatus.COMPLETED

    def test_accepts_string_status(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="")
        record.transition_to("processing")
        assert record.status is DocumentStatus.PROCESSING

    def test_restart_from_terminal(self):
        record = DocumentRecord(
            id="d", filename="r.pdf", url="",
            status=DocumentStatus.FAILED, error_message="boom",
        )
        record.restart()

        assert record.status is DocumentStatus.PENDING
        assert record.error_message is None

    def test_restart_requires_terminal(self):
        record = DocumentRecord(id="d", filename="r.pdf", url="", status=DocumentStatus.PROCESSING)
        with pytest.raises(InvalidStatusTransition):
            record.restart()

    def test_dict_round_trip(self):
        record = DocumentRecord(
            id="d", filename="r.pdf", url="u", status=DocumentStatus.COMPLETED,
            size=120, total_chunks=3,
        )
        assert DocumentRecord.from_dict(record.to_dict()) == record
