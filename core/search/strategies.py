# Path: core/search/strategies.py
# Purpose: Define query strategies that decide how each input modality is normalized and filtered.
# Layer: core/search.
# Details: Vector queries are stretched directly; bitmap queries are subject-isolated and filtered more loosely.

from __future__ import annotations

from abc import ABC, abstractmethod

from config.settings import RankingSettings
from core.imaging.normalizer import ImageNormalizer
from core.models.domain import NormalizationMode, QueryModality, RasterImage


class QueryStrategy(ABC):
    """Interface for turning a query payload into a canonical raster and a cut-off."""

    modality: QueryModality
    description: str
    mode: NormalizationMode

    def build_query_raster(self, normalizer: ImageNormalizer, data: bytes) -> RasterImage:
        """Create the canonical query raster using the supplied normalizer."""

        return normalizer.normalize(data, self.mode)

    @abstractmethod
    def threshold(self, settings: RankingSettings) -> float:
        """Return the mismatch ratio at or above which corpus entries are dropped."""


class VectorQuery(QueryStrategy):
    """Strategy for SVG markup drawn in the same coordinate space as the corpus."""

    modality = QueryModality.VECTOR
    description = "Stretch the rendered markup to the canonical size without isolating the subject."
    mode = NormalizationMode.DIRECT

    def threshold(self, settings: RankingSettings) -> float:
        return settings.vector_threshold


class BitmapQuery(QueryStrategy):
    """Strategy for hand-drawn bitmaps whose canvas rarely matches the corpus framing."""

    modality = QueryModality.BITMAP
    description = "Crop to the drawn subject, pad it square, then resize to the canonical size."
    mode = NormalizationMode.ISOLATED

    def threshold(self, settings: RankingSettings) -> float:
        return settings.bitmap_threshold
