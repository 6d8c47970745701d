"""Tests for CLI entry point and rendering."""

import sys
from dataclasses import replace
from pathlib import Path

import pytest

from memgrid import cli
from memgrid.memory.base import Category, Memory, Visibility


def _memory(visibility: Visibility, author: str | None) -> Memory:
    return Memory(
        id="m-1",
        title="Fire",
        category=Category.KNOWLEDGE,
        content="It burns",
        visibility=visibility,
        owner_id="u1",
        author_label=author,
        created_at_epoch=1,
        created_at_display="October 19, 2026",
    )


def test_format_public_memory():
    text = cli.format_memory(_memory(Visibility.PUBLIC, "a@x.com"))
    assert text.startswith("[Knowledge] Fire")
    assert "by a@x.com" in text


def test_format_private_memory_hides_author():
    text = cli.format_memory(_memory(Visibility.PRIVATE, None))
    assert "private" in text
    assert "by " not in text


def test_long_content_is_previewed():
    memory = replace(_memory(Visibility.PUBLIC, "a@x.com"), content="x" * 200)
    text = cli.format_memory(memory)
    assert ("x" * 150 + "...") in text
    assert ("x" * 151) not in text


def test_preview_keeps_short_content():
    assert cli.preview("It burns") == "It burns"
    assert cli.preview("y" * 150) == "y" * 150


def test_count_line():
    assert cli.count_line(1) == "1 memory preserved for humanity"
    assert cli.count_line(3) == "3 memories preserved for humanity"


def test_print_memories_shows_count(capsys):
    cli._print_memories([_memory(Visibility.PUBLIC, "a@x.com")] * 2)
    assert capsys.readouterr().out.startswith("2 memories preserved for humanity")


@pytest.fixture
def data_dir(tmp_path: Path, monkeypatch):
    monkeypatch.setenv("MEMGRID_DATA_DIR", str(tmp_path))
    monkeypatch.chdir(tmp_path)
    return tmp_path


def test_usage_without_command(data_dir, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["memgrid"])
    assert cli.main() == 1
    assert "Usage" in capsys.readouterr().out


def test_unknown_command(data_dir, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["memgrid", "bogus"])
    assert cli.main() == 1
    assert "Unknown command" in capsys.readouterr().out


def test_init_and_list(data_dir, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["memgrid", "init"])
    assert cli.main() == 0
    assert (data_dir / "memgrid.db").exists()

    monkeypatch.setattr(sys, "argv", ["memgrid", "list"])
    assert cli.main() == 0
    assert "No memories yet." in capsys.readouterr().out


def test_export_command(data_dir, monkeypatch, capsys):
    monkeypatch.setattr(sys, "argv", ["memgrid", "export"])
    assert cli.main() == 0
    exports = list((data_dir / "exports").glob("humanity-memory-grid-*.json"))
    assert len(exports) == 1
    assert exports[0].read_text() == "[]"
