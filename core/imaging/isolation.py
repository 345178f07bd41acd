# Path: core/imaging/isolation.py
# Purpose: Isolate the drawn subject of an image and square it up before canonical resizing.
# Layer: core/imaging.
# Details: Background detection is a pluggable strategy; cropping, square padding and white fill are shared.

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple, Type

import numpy as np
from PIL import Image

from config.settings import NormalizerSettings
from core.errors import GeometryFallback
from core.models.domain import BoundingBox, RasterImage

from .codec import RasterCodec

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)

# ITU-R 601-2 luma weights, the same ones Pillow uses for mode "L".
_LUMA_WEIGHTS = np.array([0.299, 0.587, 0.114], dtype=np.float32)


def luminance(pixels: np.ndarray) -> np.ndarray:
    """Return the per-pixel luma of an (h, w, 4) RGBA array."""

    return pixels[..., :3].astype(np.float32) @ _LUMA_WEIGHTS


class DetectionStrategy(ABC):
    """Interface for telling subject pixels apart from background pixels."""

    id: str
    description: str

    @abstractmethod
    def foreground_mask(self, pixels: np.ndarray) -> np.ndarray:
        """Return a boolean (h, w) mask that is True for every subject pixel."""

    def prepare(self, pixels: np.ndarray, mask: np.ndarray) -> np.ndarray:
        """Optionally adjust subject pixels before cropping. Defaults to no change."""

        return pixels


class ColorToleranceDetection(DetectionStrategy):
    """Compare every pixel with the top-left corner pixel, ignoring alpha."""

    id = "color_tolerance"
    description = "Background is the corner pixel; RGB channels within the tolerance count as background."

    def __init__(self, tolerance: int = 25, recolor_light_strokes: bool = False, light_threshold: int = 220) -> None:
        self.tolerance = tolerance
        self.recolor_light_strokes = recolor_light_strokes
        self.light_threshold = light_threshold

    def foreground_mask(self, pixels: np.ndarray) -> np.ndarray:
        background = pixels[0, 0, :3].astype(np.int16)
        distance = np.abs(pixels[..., :3].astype(np.int16) - background)
        return (distance >= self.tolerance).any(axis=2)

    def prepare(self, pixels: np.ndarray, mask: np.ndarray) -> np.ndarray:
        if not self.recolor_light_strokes:
            return pixels
        light = mask & (luminance(pixels) >= self.light_threshold)
        if not light.any():
            return pixels
        recolored = pixels.copy()
        recolored[light] = BLACK
        return recolored


class GrayscaleThresholdDetection(DetectionStrategy):
    """Treat every pixel darker than a fixed luminance as subject."""

    id = "grayscale_threshold"
    description = "Pixels with luminance below the threshold are subject, everything else is background."

    def __init__(self, threshold: int = 220) -> None:
        self.threshold = threshold

    def foreground_mask(self, pixels: np.ndarray) -> np.ndarray:
        return luminance(pixels) < self.threshold


DETECTION_STRATEGIES: Dict[str, Type[DetectionStrategy]] = {
    ColorToleranceDetection.id: ColorToleranceDetection,
    GrayscaleThresholdDetection.id: GrayscaleThresholdDetection,
}


def build_detection_strategy(settings: NormalizerSettings) -> DetectionStrategy:
    """Instantiate the detection strategy named in ``settings``."""

    if settings.detection_strategy == ColorToleranceDetection.id:
        return ColorToleranceDetection(
            tolerance=settings.background_tolerance,
            recolor_light_strokes=settings.recolor_light_strokes,
            light_threshold=settings.grayscale_threshold,
        )
    if settings.detection_strategy == GrayscaleThresholdDetection.id:
        return GrayscaleThresholdDetection(threshold=settings.grayscale_threshold)
    raise ValueError(
        f"Unknown detection strategy: {settings.detection_strategy} (expected one of {sorted(DETECTION_STRATEGIES)})"
    )


def bounding_box(mask: np.ndarray) -> BoundingBox:
    """Return the tightest inclusive box around the True cells of ``mask``."""

    height, width = mask.shape
    ys, xs = np.nonzero(mask)
    if xs.size == 0:
        return BoundingBox.empty(width, height)
    return BoundingBox(
        x1=int(xs.min()),
        y1=int(ys.min()),
        x2=int(xs.max()),
        y2=int(ys.max()),
        source_width=width,
        source_height=height,
    )


def square_region(box: BoundingBox) -> Tuple[int, int, int, int]:
    """Pad the shorter side of ``box`` so the region becomes square.

    The difference is split in half with the extra pixel going after the box.
    The region may extend past any image edge; cropping fills that part white.
    """

    x1, y1, x2, y2 = box.x1, box.y1, box.x2, box.y2
    diff = box.width - box.height
    before, after = abs(diff) // 2, abs(diff) - abs(diff) // 2
    if diff > 0:
        y1, y2 = y1 - before, y2 + after
    elif diff < 0:
        x1, x2 = x1 - before, x2 + after
    return x1, y1, x2, y2


def crop_region(pixels: np.ndarray, region: Tuple[int, int, int, int]) -> np.ndarray:
    """Crop an inclusive region, filling any part outside the image with opaque white."""

    x1, y1, x2, y2 = region
    height, width = pixels.shape[:2]
    canvas = np.full((y2 - y1 + 1, x2 - x1 + 1, 4), 255, dtype=np.uint8)
    # Source reads are clamped to the image; the canvas keeps the full region.
    src_x1, src_y1 = max(x1, 0), max(y1, 0)
    src_x2, src_y2 = min(x2 + 1, width), min(y2 + 1, height)
    canvas[src_y1 - y1 : src_y2 - y1, src_x1 - x1 : src_x2 - x1] = pixels[src_y1:src_y2, src_x1:src_x2]
    return canvas


class SubjectIsolator:
    """Crop an image to its subject, pad it square, and resize it to the canonical size."""

    def __init__(
        self,
        strategy: Optional[DetectionStrategy] = None,
        codec: Optional[RasterCodec] = None,
        size: int = 28,
    ) -> None:
        self.strategy = strategy or ColorToleranceDetection()
        self.codec = codec or RasterCodec()
        self.size = size

    @staticmethod
    def flatten(image: Image.Image) -> np.ndarray:
        """Composite ``image`` over opaque white and return its RGBA pixels."""

        background = Image.new("RGBA", image.size, WHITE)
        return np.asarray(Image.alpha_composite(background, image.convert("RGBA")), dtype=np.uint8)

    def detect(self, image: Image.Image) -> BoundingBox:
        """Return the subject bounding box of ``image`` before any padding."""

        return bounding_box(self.strategy.foreground_mask(self.flatten(image)))

    def isolate_image(self, image: Image.Image) -> RasterImage:
        """Isolate the subject of a decoded image.

        Raises:
            GeometryFallback: if no pixel differs from the background.
        """

        pixels = self.flatten(image)
        mask = self.strategy.foreground_mask(pixels)
        box = bounding_box(mask)
        if not box.is_valid:
            raise GeometryFallback(box.source_width, box.source_height)

        pixels = self.strategy.prepare(pixels, mask)
        cropped = crop_region(pixels, square_region(box))
        return self.codec.resize(Image.fromarray(cropped), self.size)

    def isolate(self, data: bytes) -> RasterImage:
        """Decode ``data`` and isolate its subject."""

        return self.isolate_image(self.codec.decode(data))
