# Path: core/corpus/__init__.py
# Purpose: Package initializer for corpus loading and discovery.
# Layer: core/corpus.
# Details: Exposes the immutable corpus index and the icon folder scanner.

from .index import CorpusIndex
from .scanner import IconScanner

__all__ = ["CorpusIndex", "IconScanner"]
