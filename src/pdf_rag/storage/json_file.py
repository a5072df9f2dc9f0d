"""
Single-file JSON store, used by the CLI so state survives between runs.

The whole store is rewritten on every change (write to a temp file, then
replace). Fine for a handful of PDFs; use PgStore beyond that.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pdf_rag.core.models import Chunk, DocumentRecord
from pdf_rag.storage.memory import InMemoryStore

logger = logging.getLogger(__name__)


class JsonFileStore(InMemoryStore):
    """InMemoryStore that loads from and saves to one JSON file."""

    def __init__(self, path: str | Path):
        super().__init__()
        self.path = Path(path)
        self._load()

    def _load(self) -> None:
        if not self.path.exists():
            return

        data = json.loads(self.path.read_text(encoding="utf-8"))
        for item in data.get("documents", []):
            record = DocumentRecord.from_dict(item)
            self._documents[record.id] = record
        for item in data.get("chunks", []):
            chunk = Chunk.from_dict(item)
            self._chunks[chunk.id] = chunk

        logger.debug(
            "Loaded %d documents and %d chunks from %s",
            len(self._documents), len(self._chunks), self.path,
        )

    def _changed(self) -> None:
        # Called with the lock held
        data = {
            "documents": [r.to_dict() for r in self._documents.values()],
            "chunks": [c.to_dict() for c in self._chunks.values()],
        }
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self.path.with_suffix(self.path.suffix + ".tmp")
        tmp.write_text(json.dumps(data, ensure_ascii=False, indent=2), encoding="utf-8")
        os.replace(tmp, self.path)
