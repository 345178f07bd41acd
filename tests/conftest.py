"""Shared fixtures and image builders for the test suite."""

from __future__ import annotations

import io
import json
from pathlib import Path
from typing import Iterable, Tuple

import numpy as np
import pytest
from PIL import Image

from core.models.domain import RasterImage

WHITE = (255, 255, 255, 255)
BLACK = (0, 0, 0, 255)

SQUARE_SVG = (
    b'<svg xmlns="http://www.w3.org/2000/svg" width="28" height="28">'
    b'<rect x="0" y="0" width="28" height="28" fill="#000000"/></svg>'
)


def png_bytes(image: Image.Image) -> bytes:
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def canvas(size: Tuple[int, int], color=WHITE, mode: str = "RGBA") -> Image.Image:
    return Image.new(mode, size, color[: len(mode)])


def with_square(image: Image.Image, box: Tuple[int, int, int, int], color=BLACK) -> Image.Image:
    """Paint the inclusive box ``(x1, y1, x2, y2)`` with ``color``."""

    x1, y1, x2, y2 = box
    image = image.copy()
    image.paste(color[: len(image.mode)], (x1, y1, x2 + 1, y2 + 1))
    return image


def solid_raster(color, size: int = 28) -> RasterImage:
    return RasterImage.from_array(np.full((size, size, 4), color, dtype=np.uint8))


def write_manifest(directory: Path, icons: Iterable[Tuple[str, bytes]], suffix: str = ".png") -> Path:
    """Write each icon to ``directory`` and a manifest listing them in order."""

    records = []
    for icon_id, data in icons:
        path = directory / f"{icon_id}{suffix}"
        path.write_bytes(data)
        records.append({"id": icon_id, "path": path.name})
    manifest = directory / "manifest.json"
    manifest.write_text(json.dumps(records), encoding="utf-8")
    return manifest


@pytest.fixture
def black_png() -> bytes:
    return png_bytes(canvas((28, 28), BLACK))


@pytest.fixture
def white_png() -> bytes:
    return png_bytes(canvas((28, 28), WHITE))
