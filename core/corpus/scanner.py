# Path: core/corpus/scanner.py
# Purpose: Scan folders and collect icon files as corpus entries.
# Layer: core/corpus.
# Details: Used by the manifest builder script; identifiers are file stems, falling back to the relative path on clashes.

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Set

from core.models.domain import CorpusEntry

SUPPORTED_EXTENSIONS = {".svg", ".png", ".jpg", ".jpeg", ".bmp", ".gif", ".webp"}


class IconScanner:
    """Scan filesystem paths for supported icon files."""

    def __init__(self, root: Path) -> None:
        self.root = root

    def scan(self) -> List[CorpusEntry]:
        """Return discovered icons in a stable (sorted path) order."""

        entries: List[CorpusEntry] = []
        seen: Set[str] = set()
        for path in sorted(self._iter_icon_files()):
            entry_id = path.stem
            if entry_id in seen:
                entry_id = path.relative_to(self.root).as_posix()
            base, counter = entry_id, 2
            while entry_id in seen:
                entry_id = f"{base}-{counter}"
                counter += 1
            seen.add(entry_id)
            entries.append(CorpusEntry(id=entry_id, path=path))
        return entries

    def _iter_icon_files(self) -> Iterable[Path]:
        """Yield icon files under the root directory."""

        for path in self.root.rglob("*"):
            if path.is_file() and path.suffix.lower() in SUPPORTED_EXTENSIONS:
                yield path
