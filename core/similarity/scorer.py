# Path: core/similarity/scorer.py
# Purpose: Score how different two canonical rasters are.
# Layer: core/similarity.
# Details: Counts perceptually different pixels with pixelmatch, skipping anti-aliased edges.

from __future__ import annotations

from pixelmatch import pixelmatch

from config.settings import RankingSettings
from core.models.domain import RasterImage


class SimilarityScorer:
    """Compute the mismatch ratio between two rasters of the same size."""

    def __init__(self, threshold: float = 0.1, include_aa: bool = False) -> None:
        self.threshold = threshold
        self.include_aa = include_aa

    @classmethod
    def from_settings(cls, settings: RankingSettings) -> "SimilarityScorer":
        return cls(threshold=settings.pixel_threshold, include_aa=settings.include_aa)

    def count_mismatches(self, first: RasterImage, second: RasterImage) -> int:
        """Return the number of pixels that differ beyond the color threshold."""

        if (first.width, first.height, first.channels) != (second.width, second.height, second.channels):
            raise ValueError(
                f"Cannot compare {first.width}x{first.height}x{first.channels} raster "
                f"with {second.width}x{second.height}x{second.channels} raster."
            )
        return pixelmatch(
            first.data,
            second.data,
            first.width,
            first.height,
            threshold=self.threshold,
            includeAA=self.include_aa,
        )

    def mismatch_ratio(self, first: RasterImage, second: RasterImage) -> float:
        """Return differing pixels divided by total pixels, always within [0, 1]."""

        return self.count_mismatches(first, second) / first.pixel_count
