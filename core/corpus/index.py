# Path: core/corpus/index.py
# Purpose: Load and expose the immutable, ordered corpus of reference icons.
# Layer: core/corpus.
# Details: Entries come from a static JSON manifest loaded once at startup; insertion order is preserved.

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional, Tuple

from core.errors import ManifestError
from core.models.domain import CorpusEntry

logger = logging.getLogger(__name__)


class CorpusIndex:
    """Read-only, insertion-ordered collection of corpus entries.

    There is no mutation API, so one instance can be shared by any number of
    concurrent queries.
    """

    def __init__(self, entries: Iterable[CorpusEntry]) -> None:
        ordered: Tuple[CorpusEntry, ...] = tuple(entries)
        by_id: Dict[str, CorpusEntry] = {}
        for entry in ordered:
            if entry.id in by_id:
                raise ManifestError(f"Duplicate corpus identifier: {entry.id!r}")
            by_id[entry.id] = entry
        self._entries = ordered
        self._by_id = by_id

    @classmethod
    def from_manifest(cls, path: Path | str) -> "CorpusIndex":
        """Load corpus entries from a JSON manifest.

        The manifest is either a list of ``{"id": ..., "path": ...}`` records or
        an object holding that list under ``"icons"``. Relative paths resolve
        against the manifest's directory.
        """

        manifest_path = Path(path)
        try:
            payload = json.loads(manifest_path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise ManifestError(f"Cannot read corpus manifest {manifest_path}: {exc}") from exc

        records = payload.get("icons") if isinstance(payload, dict) else payload
        if not isinstance(records, list):
            raise ManifestError(f"Corpus manifest {manifest_path} must contain a list of icons.")

        base_dir = manifest_path.parent
        entries = [cls._parse_record(record, position, base_dir) for position, record in enumerate(records)]
        index = cls(entries)
        logger.info("Loaded %d corpus entries from %s", len(index), manifest_path)
        return index

    @staticmethod
    def _parse_record(record: Any, position: int, base_dir: Path) -> CorpusEntry:
        if not isinstance(record, dict) or "id" not in record or "path" not in record:
            raise ManifestError(f"Manifest record #{position} must be an object with 'id' and 'path'.")
        entry_path = Path(str(record["path"]))
        if not entry_path.is_absolute():
            entry_path = base_dir / entry_path
        return CorpusEntry(id=str(record["id"]), path=entry_path)

    def to_manifest(self, base_dir: Optional[Path] = None) -> List[Dict[str, str]]:
        """Serialize entries back to manifest records, relative to ``base_dir`` when possible."""

        records: List[Dict[str, str]] = []
        for entry in self._entries:
            path = entry.path
            if base_dir is not None and path.is_relative_to(base_dir):
                path = path.relative_to(base_dir)
            records.append({"id": entry.id, "path": path.as_posix()})
        return records

    @property
    def entries(self) -> Tuple[CorpusEntry, ...]:
        return self._entries

    def get(self, entry_id: str) -> Optional[CorpusEntry]:
        """Return the entry with ``entry_id`` if present."""

        return self._by_id.get(entry_id)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[CorpusEntry]:
        return iter(self._entries)
