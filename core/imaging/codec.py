# Path: core/imaging/codec.py
# Purpose: Decode encoded icon bytes and resize them into RGBA rasters.
# Layer: core/imaging.
# Details: SVG markup is rendered with CairoSVG; every other format is opened by Pillow.

from __future__ import annotations

import io

import cairosvg
import numpy as np
from PIL import Image

from core.errors import DecodeError
from core.models.domain import RasterImage

# Only the head of the payload is inspected when sniffing for SVG markup.
_SNIFF_BYTES = 1024


def is_svg(data: bytes) -> bool:
    """Return True when ``data`` looks like SVG markup rather than a bitmap."""

    head = data[:_SNIFF_BYTES].lstrip().lower()
    if head.startswith(b"\xef\xbb\xbf"):
        head = head[3:].lstrip()
    return head.startswith(b"<") and b"<svg" in head


class RasterCodec:
    """Decode vector or bitmap bytes and resample them to fixed-size RGBA rasters."""

    resample = Image.Resampling.LANCZOS

    def decode(self, data: bytes) -> Image.Image:
        """Decode ``data`` into a fully loaded RGBA Pillow image.

        Raises:
            DecodeError: if the bytes are empty, malformed, or in an unsupported format.
        """

        if not data:
            raise DecodeError("Cannot decode an empty image payload.")

        if is_svg(data):
            data = self._render_svg(data)

        try:
            with Image.open(io.BytesIO(data)) as img:
                img.load()
                return img.convert("RGBA")
        except (OSError, ValueError, Image.DecompressionBombError) as exc:
            raise DecodeError(f"Unsupported or malformed image data: {exc}") from exc

    def resize(self, image: Image.Image, size: int) -> RasterImage:
        """Stretch ``image`` to ``size`` x ``size`` with independent x/y scale factors."""

        resized = image.convert("RGBA").resize((size, size), self.resample)
        return RasterImage.from_array(np.asarray(resized, dtype=np.uint8))

    def decode_raster(self, data: bytes, size: int) -> RasterImage:
        """Decode ``data`` and resize it straight to a canonical raster."""

        return self.resize(self.decode(data), size)

    @staticmethod
    def _render_svg(data: bytes) -> bytes:
        try:
            return cairosvg.svg2png(bytestring=data)
        except Exception as exc:  # noqa: BLE001
            raise DecodeError(f"Invalid SVG markup: {exc}") from exc
