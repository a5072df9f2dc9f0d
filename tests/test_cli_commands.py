"""
Unit Tests for CLI Commands

Commands run against a JSON file store in a temp directory with no
OPENAI_API_KEY, so everything is lexical and template based.
"""

import json

import pytest
from unittest.mock import patch

from pdf_rag.cli import commands
from pdf_rag.cli.commands import read_pages


@pytest.fixture
def cli_env(tmp_path, monkeypatch):
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    monkeypatch.delenv("RAG_STORE", raising=False)
    monkeypatch.setenv("PHOENIX_ENABLED", "false")
    monkeypatch.setenv("RAG_STORE_PATH", str(tmp_path / "store.json"))
    return tmp_path


@pytest.fixture
def report_file(tmp_path):
    path = tmp_path / "report.txt"
    path.write_text(
        "Company overview.\fRevenue was $100 billion in 2023, up 10% year over year.\f",
        encoding="utf-8",
    )
    return path


def run(func, *argv):
    with patch("sys.argv", ["pdf-rag", *argv]):
        return func()


# ---------------------------------------------------------------------------
# LOAD_ENV TESTS
# ---------------------------------------------------------------------------


class TestLoadEnv:
    def test_load_env_does_not_raise(self):
        commands._load_env()


# ---------------------------------------------------------------------------
# PAGE READING
# ---------------------------------------------------------------------------


class TestReadPages:
    def test_splits_on_form_feed(self, report_file):
        pages = read_pages(report_file)

        assert len(pages) == 2
        assert pages[1].startswith("Revenue")

    def test_single_page(self, tmp_path):
        path = tmp_path / "one.txt"
        path.write_text("Just one page", encoding="utf-8")
        assert read_pages(path) == ["Just one page"]

    def test_keeps_blank_middle_pages(self, tmp_path):
        path = tmp_path / "gap.txt"
        path.write_text("a\f\fc", encoding="utf-8")
        assert read_pages(path) == ["a", "", "c"]


# ---------------------------------------------------------------------------
# MAIN CLI DISPATCH TESTS
# ---------------------------------------------------------------------------


class TestMainCliDispatch:
    """Main should forward to the subcommand with the remaining args."""

    @pytest.mark.parametrize(
        "command,handler",
        [
            ("ingest", "run_ingest_cli"),
            ("ask", "run_ask_cli"),
            ("documents", "run_documents_cli"),
            ("delete", "run_delete_cli"),
        ],
    )
    def test_dispatch(self, command, handler):
        with patch.object(commands, handler, return_value=0) as mock_handler:
            with patch("sys.argv", ["pdf-rag", command]):
                result = commands.main()

        mock_handler.assert_called_once()
        assert result == 0

    def test_remaining_args_are_reinjected(self):
        seen = {}

        def fake_ask():
            import sys
            seen["argv"] = list(sys.argv)
            return 0

        with patch.object(commands, "run_ask_cli", side_effect=fake_ask):
            with patch("sys.argv", ["pdf-rag", "ask", "revenue?", "--document-id", "1"]):
                commands.main()

        assert seen["argv"] == ["pdf-rag", "revenue?", "--document-id", "1"]

    def test_unknown_command_exits(self):
        with patch("sys.argv", ["pdf-rag", "unknown"]):
            with pytest.raises(SystemExit):
                commands.main()

    def test_keyboard_interrupt(self):
        with patch.object(commands, "run_documents_cli", side_effect=KeyboardInterrupt):
            with patch("sys.argv", ["pdf-rag", "documents"]):
                assert commands.main() == 130


# ---------------------------------------------------------------------------
# COMMANDS AGAINST A FILE STORE
# ---------------------------------------------------------------------------


class TestCommands:
    def test_ingest_then_ask(self, cli_env, report_file, capsys):
        assert run(commands.run_ingest_cli, str(report_file), "--document-id", "1") == 0
        assert "Ingested report.pdf: 2 chunks from 2 pages" in capsys.readouterr().out

        assert run(commands.run_ask_cli, "What was the revenue in 2023?", "--document-id", "1") == 0

        out = capsys.readouterr().out
        assert "According to report.pdf, page 2" in out
        assert "  - report.pdf, page 2" in out

    def test_ask_json(self, cli_env, report_file, capsys):
        run(commands.run_ingest_cli, str(report_file), "--document-id", "1", "--filename", "annual.pdf")
        capsys.readouterr()

        run(commands.run_ask_cli, "revenue", "--document-id", "1", "--json")

        payload = json.loads(capsys.readouterr().out)
        assert payload["sources"][0]["filename"] == "annual.pdf"
        assert payload["strategy"] == "lexical"

    def test_blank_query_is_an_error(self, cli_env, capsys):
        assert run(commands.run_ask_cli, "  ", "--document-id", "1") == 1
        assert "ERROR" in capsys.readouterr().err

    def test_documents_and_delete(self, cli_env, report_file, capsys):
        run(commands.run_ingest_cli, str(report_file), "--document-id", "1")
        capsys.readouterr()

        assert run(commands.run_documents_cli, "--status", "completed") == 0
        assert "report.pdf" in capsys.readouterr().out

        assert run(commands.run_delete_cli, "--document-id", "1") == 0
        assert "Deleted 1 (2 chunks)" in capsys.readouterr().out

        run(commands.run_documents_cli)
        assert "No documents" in capsys.readouterr().out

    def test_delete_unknown(self, cli_env, capsys):
        assert run(commands.run_delete_cli, "--document-id", "nope") == 1
