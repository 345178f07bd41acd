# Path: core/search/ranking.py
# Purpose: Rank every corpus entry against a canonical query raster.
# Layer: core/search.
# Details: Bounded thread-pool fan-out over the corpus, joined before filtering, stable sort, and truncation.

from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional, Tuple

from core.corpus.index import CorpusIndex
from core.errors import CorpusEntryError, DecodeError
from core.imaging.normalizer import ImageNormalizer
from core.models.domain import CorpusEntry, MatchResult, NormalizationMode, RasterImage
from core.similarity.scorer import SimilarityScorer

logger = logging.getLogger(__name__)


class RankingEngine:
    """Score a query raster against the whole corpus and keep the best matches."""

    def __init__(
        self,
        corpus: CorpusIndex,
        normalizer: ImageNormalizer,
        scorer: SimilarityScorer,
        result_limit: int = 10,
        max_workers: int = 8,
    ) -> None:
        self._corpus = corpus
        self._corpus_lock = threading.Lock()
        self.normalizer = normalizer
        self.scorer = scorer
        self.result_limit = result_limit
        self.max_workers = max_workers

    @property
    def corpus(self) -> CorpusIndex:
        with self._corpus_lock:
            return self._corpus

    def swap_corpus(self, corpus: CorpusIndex) -> CorpusIndex:
        """Replace the corpus used by subsequent queries and return the previous one.

        Queries already running keep ranking against the corpus they started with.
        """

        with self._corpus_lock:
            previous, self._corpus = self._corpus, corpus
        logger.info("Swapped corpus: %d -> %d entries", len(previous), len(corpus))
        return previous

    def rank(self, query: RasterImage, threshold: float) -> List[MatchResult]:
        """
        Return up to ``result_limit`` entries whose mismatch is below ``threshold``.

        Results are ordered by ascending mismatch; equal mismatches keep corpus
        order. Entries that fail to load or decode are logged and skipped.
        """

        corpus = self.corpus
        if len(corpus) == 0:
            return []

        workers = max(1, min(self.max_workers, len(corpus)))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="rank") as pool:
            scored = list(pool.map(lambda entry: self._score_entry(query, entry), corpus))

        # Pairs are (position, result); sorting on (mismatch, position) keeps ties in corpus order.
        ranked: List[Tuple[int, MatchResult]] = [
            (position, result)
            for position, result in enumerate(scored)
            if result is not None and result.mismatch < threshold
        ]
        ranked.sort(key=lambda item: (item[1].mismatch, item[0]))
        return [result for _, result in ranked[: self.result_limit]]

    def _score_entry(self, query: RasterImage, entry: CorpusEntry) -> Optional[MatchResult]:
        try:
            raster = self._normalize_entry(entry)
        except CorpusEntryError as exc:
            logger.warning("%s; excluding it from this query.", exc)
            return None

        mismatch = self.scorer.mismatch_ratio(query, raster)
        return MatchResult(id=entry.id, mismatch=mismatch, exact_match=mismatch == 0, path=entry.path)

    def _normalize_entry(self, entry: CorpusEntry) -> RasterImage:
        try:
            data = entry.read_bytes()
        except OSError as exc:
            raise CorpusEntryError(entry.id, f"cannot read {entry.path}: {exc}") from exc
        try:
            return self.normalizer.normalize(data, NormalizationMode.DIRECT)
        except DecodeError as exc:
            raise CorpusEntryError(entry.id, str(exc)) from exc
