# Path: core/models/domain.py
# Purpose: Define domain models shared across normalization, ranking, and the HTTP layer.
# Layer: core/models.
# Details: Lightweight dataclasses simplify serialization between API, scripts, and core services.

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional

import numpy as np

RGBA_CHANNELS = 4


class QueryModality(str, Enum):
    """Kind of drawing a query image was derived from."""

    VECTOR = "vector"
    BITMAP = "bitmap"


class NormalizationMode(str, Enum):
    """How an input is reduced to a canonical raster."""

    DIRECT = "direct"
    ISOLATED = "isolated"


@dataclass(frozen=True)
class RasterImage:
    """Row-major RGBA pixel buffer, top row first."""

    width: int
    height: int
    data: bytes
    channels: int = RGBA_CHANNELS

    def __post_init__(self) -> None:
        if self.channels != RGBA_CHANNELS:
            raise ValueError(f"RasterImage requires {RGBA_CHANNELS} channels, got {self.channels}.")
        expected = self.width * self.height * self.channels
        if len(self.data) != expected:
            raise ValueError(
                f"Buffer length {len(self.data)} does not match {self.width}x{self.height}x{self.channels}."
            )

    @property
    def pixel_count(self) -> int:
        return self.width * self.height

    @classmethod
    def from_array(cls, array: np.ndarray) -> "RasterImage":
        """Build a raster from an (height, width, 4) uint8 array."""

        if array.ndim != 3 or array.shape[2] != RGBA_CHANNELS:
            raise ValueError(f"Expected an (h, w, {RGBA_CHANNELS}) array, got shape {array.shape}.")
        height, width = array.shape[:2]
        return cls(width=width, height=height, data=np.ascontiguousarray(array, dtype=np.uint8).tobytes())

    def to_array(self) -> np.ndarray:
        """Return a read-only (height, width, 4) view of the buffer."""

        return np.frombuffer(self.data, dtype=np.uint8).reshape(self.height, self.width, self.channels)


@dataclass(frozen=True)
class BoundingBox:
    """Inclusive pixel box around the detected subject of a source image.

    A box with ``x1 > x2`` or ``y1 > y2`` is invalid and means that no pixel
    differs from the background.
    """

    x1: int
    y1: int
    x2: int
    y2: int
    source_width: int
    source_height: int

    @classmethod
    def empty(cls, source_width: int, source_height: int) -> "BoundingBox":
        return cls(x1=source_width, y1=source_height, x2=-1, y2=-1,
                   source_width=source_width, source_height=source_height)

    @property
    def is_valid(self) -> bool:
        return (
            0 <= self.x1 <= self.x2 <= self.source_width
            and 0 <= self.y1 <= self.y2 <= self.source_height
        )

    @property
    def width(self) -> int:
        return self.x2 - self.x1

    @property
    def height(self) -> int:
        return self.y2 - self.y1


@dataclass(frozen=True)
class CorpusEntry:
    """Reference icon known to the service."""

    id: str
    path: Path

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()


@dataclass
class MatchResult:
    """Corpus entry that survived filtering, with its mismatch against the query."""

    id: str
    mismatch: float
    exact_match: bool
    path: Optional[Path] = None

    def to_payload(self, include_path: bool = False) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"id": self.id, "mismatch": self.mismatch, "exactMatch": self.exact_match}
        if include_path and self.path is not None:
            payload["path"] = str(self.path)
        return payload


@dataclass
class MatchResponse:
    """Ranked results for one query plus the time spent producing them."""

    results: List[MatchResult] = field(default_factory=list)
    elapsed_ms: float = 0.0

    def to_payload(self, include_path: bool = False) -> Dict[str, Any]:
        return {
            "sortedRes": [result.to_payload(include_path) for result in self.results],
            "time": round(self.elapsed_ms),
        }
