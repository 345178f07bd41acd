# Path: core/errors.py
# Purpose: Define the error kinds raised by the normalization and ranking pipeline.
# Layer: core.
# Details: DecodeError aborts a query, CorpusEntryError is contained per entry, GeometryFallback is a signal.

from __future__ import annotations


class DecodeError(ValueError):
    """Raised when image bytes are malformed or in an unsupported format."""


class GeometryFallback(Exception):
    """Raised by subject isolation when no foreground pixel was found.

    Not a failure: the normalizer catches it and normalizes the whole image directly.
    """

    def __init__(self, width: int, height: int) -> None:
        super().__init__(f"No foreground detected in {width}x{height} image.")
        self.width = width
        self.height = height


class CorpusEntryError(RuntimeError):
    """Raised when a single corpus entry cannot be normalized or scored."""

    def __init__(self, entry_id: str, reason: str) -> None:
        super().__init__(f"Corpus entry {entry_id!r} failed: {reason}")
        self.entry_id = entry_id
        self.reason = reason


class ManifestError(ValueError):
    """Raised when the corpus manifest cannot be read or is malformed."""


__all__ = ["CorpusEntryError", "DecodeError", "GeometryFallback", "ManifestError"]
