"""Tests for atomic file writers."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from unogen.io import read_text_file, write_json_atomic, write_text_atomic


def test_write_json_atomic_cleans_temp_file_on_error(tmp_path: Path) -> None:
    out_path = tmp_path / "report.json"
    temp_prefix = ".tmp-"
    temp_suffix = ".json"

    with pytest.raises(TypeError):
        write_json_atomic(
            path=out_path,
            payload={"bad": object()},
            temp_prefix=temp_prefix,
            temp_suffix=temp_suffix,
        )

    leftovers = [
        item for item in tmp_path.iterdir() if item.name.startswith(temp_prefix) and item.name.endswith(temp_suffix)
    ]
    assert not leftovers
    assert not out_path.exists()


def test_write_json_atomic_sorts_keys(tmp_path: Path) -> None:
    out_path = tmp_path / "report.json"

    write_json_atomic(path=out_path, payload={"b": 1, "a": [2]}, temp_prefix=".tmp-", temp_suffix=".json")

    text = out_path.read_text(encoding="utf-8")
    assert text.endswith("\n")
    assert text.index('"a"') < text.index('"b"')
    assert json.loads(text) == {"a": [2], "b": 1}


def test_write_text_atomic_replaces_existing_file(tmp_path: Path) -> None:
    out_path = tmp_path / "nested" / "out.css"
    out_path.parent.mkdir()
    out_path.write_text("old", encoding="utf-8")

    write_text_atomic(path=out_path, content=".m-1{margin:0.25rem;}\n", temp_prefix=".tmp-", temp_suffix=".css")

    assert read_text_file(out_path) == ".m-1{margin:0.25rem;}\n"
    assert [item.name for item in out_path.parent.iterdir()] == ["out.css"]


def test_write_text_atomic_creates_parent_directories(tmp_path: Path) -> None:
    out_path = tmp_path / "a" / "b" / "out.css"

    write_text_atomic(path=out_path, content="", temp_prefix=".tmp-", temp_suffix=".css")

    assert out_path.exists()
