# Path: core/models/__init__.py
# Purpose: Package initializer for domain model definitions.
# Layer: core/models.
# Details: Exposes dataclasses used across normalization, ranking, and API layers.

from .domain import (
    RGBA_CHANNELS,
    BoundingBox,
    CorpusEntry,
    MatchResponse,
    MatchResult,
    NormalizationMode,
    QueryModality,
    RasterImage,
)

__all__ = [
    "RGBA_CHANNELS",
    "BoundingBox",
    "CorpusEntry",
    "MatchResponse",
    "MatchResult",
    "NormalizationMode",
    "QueryModality",
    "RasterImage",
]
