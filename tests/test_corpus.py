"""Tests for corpus manifest loading and icon discovery."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from core.corpus.index import CorpusIndex
from core.corpus.scanner import IconScanner
from core.errors import ManifestError
from core.models.domain import CorpusEntry

from conftest import write_manifest


def test_manifest_list_preserves_order_and_resolves_paths(tmp_path: Path) -> None:
    manifest = write_manifest(tmp_path, [("zeta", b"z"), ("alpha", b"a"), ("mid", b"m")])

    index = CorpusIndex.from_manifest(manifest)

    assert [entry.id for entry in index] == ["zeta", "alpha", "mid"]
    assert index.get("alpha").path == tmp_path / "alpha.png"
    assert index.get("alpha").read_bytes() == b"a"
    assert len(index) == 3


def test_manifest_object_form(tmp_path: Path) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text(json.dumps({"icons": [{"id": 7, "path": "/abs/icon.svg"}]}), encoding="utf-8")

    index = CorpusIndex.from_manifest(manifest)

    assert index.entries == (CorpusEntry(id="7", path=Path("/abs/icon.svg")),)


@pytest.mark.parametrize(
    "content",
    [
        "not json",
        json.dumps({"items": []}),
        json.dumps([{"id": "a"}]),
        json.dumps([{"id": "a", "path": "a.svg"}, {"id": "a", "path": "b.svg"}]),
    ],
)
def test_invalid_manifests_are_rejected(tmp_path: Path, content: str) -> None:
    manifest = tmp_path / "manifest.json"
    manifest.write_text(content, encoding="utf-8")

    with pytest.raises(ManifestError):
        CorpusIndex.from_manifest(manifest)


def test_missing_manifest_is_rejected(tmp_path: Path) -> None:
    with pytest.raises(ManifestError):
        CorpusIndex.from_manifest(tmp_path / "absent.json")


def test_to_manifest_writes_relative_paths(tmp_path: Path) -> None:
    index = CorpusIndex([CorpusEntry("a", tmp_path / "icons" / "a.svg"), CorpusEntry("b", Path("/elsewhere/b.svg"))])

    assert index.to_manifest(tmp_path) == [
        {"id": "a", "path": "icons/a.svg"},
        {"id": "b", "path": "/elsewhere/b.svg"},
    ]


def test_scanner_finds_supported_icons_in_sorted_order(tmp_path: Path) -> None:
    (tmp_path / "nested").mkdir()
    for name in ["b.svg", "a.PNG", "notes.txt", "nested/c.svg", "nested/a.svg"]:
        (tmp_path / name).write_bytes(b"x")

    entries = IconScanner(tmp_path).scan()

    assert [entry.id for entry in entries] == ["a", "b", "nested/a.svg", "c"]
    assert all(entry.path.suffix.lower() in {".svg", ".png"} for entry in entries)


def test_scanner_keeps_ids_unique_for_same_stem_icons(tmp_path: Path) -> None:
    (tmp_path / "sub").mkdir()
    for name in ["star.png", "star.svg", "sub/star.svg", "sub/a.svg", "a.svg"]:
        (tmp_path / name).write_bytes(b"x")

    entries = IconScanner(tmp_path).scan()
    ids = [entry.id for entry in entries]

    assert ids == ["a", "star", "star.svg", "sub/a.svg", "sub/star.svg"]
    assert len(CorpusIndex(entries)) == 5


def test_scanner_suffixes_ids_when_relative_path_is_taken(tmp_path: Path) -> None:
    (tmp_path / "a").mkdir()
    for name in ["a/b.png.svg", "b.gif", "b.png"]:
        (tmp_path / name).write_bytes(b"x")

    ids = [entry.id for entry in IconScanner(tmp_path).scan()]

    assert ids == ["b.png", "b", "b.png-2"]
