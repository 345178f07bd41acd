# Path: core/imaging/__init__.py
# Purpose: Package initializer for decoding, subject isolation, and normalization.
# Layer: core/imaging.
# Details: Exposes the codec, detection strategies, isolator, and normalizer.

from .codec import RasterCodec, is_svg
from .isolation import (
    ColorToleranceDetection,
    DetectionStrategy,
    GrayscaleThresholdDetection,
    SubjectIsolator,
    build_detection_strategy,
)
from .normalizer import ImageNormalizer

__all__ = [
    "ColorToleranceDetection",
    "DetectionStrategy",
    "GrayscaleThresholdDetection",
    "ImageNormalizer",
    "RasterCodec",
    "SubjectIsolator",
    "build_detection_strategy",
    "is_svg",
]
