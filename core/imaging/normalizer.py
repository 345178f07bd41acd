# Path: core/imaging/normalizer.py
# Purpose: Reduce encoded query and corpus images to canonical RGBA rasters.
# Layer: core/imaging.
# Details: Direct mode stretches the whole image; isolated mode crops to the subject first.

from __future__ import annotations

import logging
from typing import Optional

from config.settings import NormalizerSettings
from core.errors import GeometryFallback
from core.models.domain import NormalizationMode, RasterImage

from .codec import RasterCodec
from .isolation import SubjectIsolator, build_detection_strategy

logger = logging.getLogger(__name__)


class ImageNormalizer:
    """Turn encoded bytes into S x S RGBA rasters ready for pixel comparison."""

    def __init__(
        self,
        size: int = 28,
        codec: Optional[RasterCodec] = None,
        isolator: Optional[SubjectIsolator] = None,
    ) -> None:
        self.size = size
        self.codec = codec or RasterCodec()
        self.isolator = isolator or SubjectIsolator(codec=self.codec, size=size)
        if self.isolator.size != size:
            raise ValueError(f"Isolator size {self.isolator.size} does not match canonical size {size}.")

    @classmethod
    def from_settings(cls, settings: NormalizerSettings) -> "ImageNormalizer":
        """Build a normalizer and its isolator from configuration."""

        codec = RasterCodec()
        isolator = SubjectIsolator(
            strategy=build_detection_strategy(settings),
            codec=codec,
            size=settings.canonical_size,
        )
        return cls(size=settings.canonical_size, codec=codec, isolator=isolator)

    def normalize(self, data: bytes, mode: NormalizationMode = NormalizationMode.DIRECT) -> RasterImage:
        """
        Produce the canonical raster for ``data``.

        Raises:
            DecodeError: if ``data`` cannot be decoded. No partial raster is returned.
        """

        image = self.codec.decode(data)
        if mode is NormalizationMode.ISOLATED:
            try:
                return self.isolator.isolate_image(image)
            except GeometryFallback as fallback:
                logger.debug("%s; normalizing the whole image instead.", fallback)
        return self.codec.resize(image, self.size)

    def normalize_direct(self, data: bytes) -> RasterImage:
        return self.normalize(data, NormalizationMode.DIRECT)

    def normalize_isolated(self, data: bytes) -> RasterImage:
        return self.normalize(data, NormalizationMode.ISOLATED)
