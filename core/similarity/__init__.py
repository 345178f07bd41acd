# Path: core/similarity/__init__.py
# Purpose: Package initializer for raster similarity scoring.
# Layer: core/similarity.
# Details: Exposes the pixel mismatch scorer.

from .scorer import SimilarityScorer

__all__ = ["SimilarityScorer"]
