# Path: core/search/pipeline.py
# Purpose: Orchestrate icon lookup by combining query strategies, the normalizer, and the ranking engine.
# Layer: core/search.
# Details: Normalizes the query for its modality, then delegates corpus ranking and measures elapsed time.

from __future__ import annotations

import logging
import time
from typing import Dict, Optional

from config.settings import AppSettings, RankingSettings
from core.corpus.index import CorpusIndex
from core.imaging.normalizer import ImageNormalizer
from core.models.domain import MatchResponse, QueryModality
from core.similarity.scorer import SimilarityScorer

from .ranking import RankingEngine
from .strategies import BitmapQuery, QueryStrategy, VectorQuery

logger = logging.getLogger(__name__)


class IconSearchPipeline:
    """High-level service bridging the API and scripts with normalization and ranking."""

    def __init__(
        self,
        normalizer: ImageNormalizer,
        engine: RankingEngine,
        settings: Optional[RankingSettings] = None,
        strategies: Optional[Dict[QueryModality, QueryStrategy]] = None,
    ) -> None:
        self.normalizer = normalizer
        self.engine = engine
        self.settings = settings or RankingSettings()
        self.strategies: Dict[QueryModality, QueryStrategy] = strategies or {
            VectorQuery.modality: VectorQuery(),
            BitmapQuery.modality: BitmapQuery(),
        }

    @classmethod
    def from_settings(cls, settings: AppSettings, corpus: Optional[CorpusIndex] = None) -> "IconSearchPipeline":
        """Wire a pipeline from configuration, loading the corpus manifest unless one is given."""

        normalizer = ImageNormalizer.from_settings(settings.normalizer)
        engine = RankingEngine(
            corpus=corpus if corpus is not None else CorpusIndex.from_manifest(settings.corpus_manifest),
            normalizer=normalizer,
            scorer=SimilarityScorer.from_settings(settings.ranking),
            result_limit=settings.ranking.result_limit,
            max_workers=settings.ranking.max_workers,
        )
        return cls(normalizer=normalizer, engine=engine, settings=settings.ranking)

    def match(self, data: bytes, modality: QueryModality) -> MatchResponse:
        """
        Rank the corpus against a query image of the given modality.

        Raises:
            DecodeError: if the query bytes cannot be decoded.
        """

        strategy = self.strategies.get(modality)
        if strategy is None:
            raise ValueError(f"Unknown query modality: {modality}")

        started = time.perf_counter()
        query_raster = strategy.build_query_raster(self.normalizer, data)
        results = self.engine.rank(query_raster, strategy.threshold(self.settings))
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.debug("%s query ranked %d results in %.1f ms", modality.value, len(results), elapsed_ms)
        return MatchResponse(results=results, elapsed_ms=elapsed_ms)

    def match_vector(self, data: bytes) -> MatchResponse:
        return self.match(data, QueryModality.VECTOR)

    def match_bitmap(self, data: bytes) -> MatchResponse:
        return self.match(data, QueryModality.BITMAP)
