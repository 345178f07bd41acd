"""Tests for corpus ranking: filtering, ordering, truncation, and failure containment."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict

import pytest

from core.corpus.index import CorpusIndex
from core.errors import DecodeError
from core.imaging.normalizer import ImageNormalizer
from core.models.domain import CorpusEntry, NormalizationMode, RasterImage
from core.search.ranking import RankingEngine
from core.similarity.scorer import SimilarityScorer

from conftest import BLACK, WHITE, canvas, png_bytes, with_square, write_manifest


class FakeNormalizer:
    """Decode b"<n>" payloads into 1x1 rasters whose red channel is n."""

    def normalize(self, data: bytes, mode: NormalizationMode = NormalizationMode.DIRECT) -> RasterImage:
        assert mode is NormalizationMode.DIRECT
        if not data.isdigit():
            raise DecodeError("not a fake icon")
        return RasterImage(width=1, height=1, data=bytes([int(data), 0, 0, 255]))


class FakeScorer:
    """Return a predetermined mismatch ratio per fake icon number."""

    def __init__(self, ratios: Dict[int, float]) -> None:
        self.ratios = ratios

    def mismatch_ratio(self, query: RasterImage, raster: RasterImage) -> float:
        return self.ratios[raster.data[0]]


def _fake_engine(tmp_path: Path, ratios: Dict[int, float], **kwargs) -> RankingEngine:
    manifest = write_manifest(tmp_path, [(f"icon-{n}", str(n).encode()) for n in ratios])
    return RankingEngine(
        corpus=CorpusIndex.from_manifest(manifest),
        normalizer=FakeNormalizer(),
        scorer=FakeScorer(ratios),
        **kwargs,
    )


QUERY = RasterImage(width=1, height=1, data=bytes([0, 0, 0, 255]))


def test_only_entries_below_threshold_are_returned_in_ascending_order(tmp_path: Path) -> None:
    ratios = {n: 0.15 + n / 100 for n in range(15)}
    ratios.update({4: 0.05, 9: 0.01, 12: 0.02})
    engine = _fake_engine(tmp_path, ratios, result_limit=10)

    results = engine.rank(QUERY, threshold=0.15)

    assert [result.id for result in results] == ["icon-9", "icon-12", "icon-4"]
    assert [result.mismatch for result in results] == [0.01, 0.02, 0.05]


def test_results_are_truncated_and_ties_keep_corpus_order(tmp_path: Path) -> None:
    ratios = {n: 0.1 for n in range(15)}
    engine = _fake_engine(tmp_path, ratios, result_limit=10)

    results = engine.rank(QUERY, threshold=0.15)

    assert len(results) == 10
    assert [result.id for result in results] == [f"icon-{n}" for n in range(10)]


def test_threshold_is_exclusive(tmp_path: Path) -> None:
    engine = _fake_engine(tmp_path, {1: 0.15, 2: 0.1499})

    results = engine.rank(QUERY, threshold=0.15)

    assert [result.id for result in results] == ["icon-2"]
    assert all(result.mismatch < 0.15 for result in results)


def test_exact_match_flag_requires_zero_mismatch(tmp_path: Path) -> None:
    engine = _fake_engine(tmp_path, {1: 0.0, 2: 0.001})

    results = engine.rank(QUERY, threshold=0.15)

    assert [(result.id, result.exact_match) for result in results] == [("icon-1", True), ("icon-2", False)]


@pytest.mark.parametrize("max_workers", [1, 3, 32])
def test_worker_count_does_not_change_results(tmp_path: Path, max_workers: int) -> None:
    ratios = {n: ((n * 7) % 11) / 100 for n in range(20)}
    engine = _fake_engine(tmp_path, ratios, max_workers=max_workers)

    results = engine.rank(QUERY, threshold=0.15)

    expected = sorted(range(20), key=lambda n: (ratios[n], n))[:10]
    assert [result.id for result in results] == [f"icon-{n}" for n in expected]


def test_broken_entries_are_excluded_and_logged(tmp_path: Path, caplog: pytest.LogCaptureFixture) -> None:
    (tmp_path / "1.png").write_bytes(b"1")
    (tmp_path / "bad.png").write_bytes(b"garbage")
    corpus = CorpusIndex(
        [
            CorpusEntry("good", tmp_path / "1.png"),
            CorpusEntry("corrupt", tmp_path / "bad.png"),
            CorpusEntry("missing", tmp_path / "absent.png"),
        ]
    )
    engine = RankingEngine(corpus=corpus, normalizer=FakeNormalizer(), scorer=FakeScorer({1: 0.0}))

    with caplog.at_level(logging.WARNING, logger="core.search.ranking"):
        results = engine.rank(QUERY, threshold=0.15)

    assert [result.id for result in results] == ["good"]
    assert "corrupt" in caplog.text
    assert "missing" in caplog.text


def test_empty_corpus_yields_no_results() -> None:
    engine = RankingEngine(corpus=CorpusIndex([]), normalizer=FakeNormalizer(), scorer=FakeScorer({}))

    assert engine.rank(QUERY, threshold=0.5) == []


def test_swap_corpus_applies_to_later_queries(tmp_path: Path) -> None:
    engine = _fake_engine(tmp_path, {1: 0.0})
    (tmp_path / "other.png").write_bytes(b"2")
    replacement = CorpusIndex([CorpusEntry("other", tmp_path / "other.png")])
    engine.scorer = FakeScorer({1: 0.0, 2: 0.0})

    previous = engine.swap_corpus(replacement)

    assert [entry.id for entry in previous] == ["icon-1"]
    assert [result.id for result in engine.rank(QUERY, threshold=0.15)] == ["other"]


def _real_engine(manifest: Path) -> RankingEngine:
    return RankingEngine(
        corpus=CorpusIndex.from_manifest(manifest),
        normalizer=ImageNormalizer(size=28),
        scorer=SimilarityScorer(),
    )


def test_identical_corpus_entry_ranks_first_as_exact_match(tmp_path: Path, white_png: bytes) -> None:
    icon = png_bytes(with_square(canvas((64, 64)), (10, 10, 40, 50)))
    other = png_bytes(with_square(canvas((64, 64)), (30, 5, 60, 20)))
    engine = _real_engine(write_manifest(tmp_path, [("other", other), ("blank", white_png), ("icon", icon)]))
    query = ImageNormalizer(size=28).normalize_direct(icon)

    results = engine.rank(query, threshold=0.5)

    assert results[0].id == "icon"
    assert results[0].mismatch == 0
    assert results[0].exact_match
    assert results[0].path == tmp_path / "icon.png"


def test_black_query_matches_nothing_in_white_corpus(tmp_path: Path, black_png: bytes) -> None:
    whites = [(f"white-{n}", png_bytes(canvas((20 + n, 20), WHITE))) for n in range(5)]
    engine = _real_engine(write_manifest(tmp_path, whites))
    query = ImageNormalizer(size=28).normalize_direct(black_png)

    assert engine.rank(query, threshold=0.15) == []


def test_real_ratios_stay_within_unit_interval(tmp_path: Path, black_png: bytes, white_png: bytes) -> None:
    half = png_bytes(with_square(canvas((28, 28)), (0, 0, 13, 27)))
    engine = _real_engine(write_manifest(tmp_path, [("black", black_png), ("white", white_png), ("half", half)]))
    query = ImageNormalizer(size=28).normalize_direct(half)

    results = engine.rank(query, threshold=1.01)

    assert {result.id for result in results} == {"black", "white", "half"}
    assert all(0.0 <= result.mismatch <= 1.0 for result in results)
    assert results[0].id == "half"
