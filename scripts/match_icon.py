# Path: scripts/match_icon.py
# Purpose: Simple CLI to match an image file against the corpus.
# Layer: scripts.
# Details: Picks the query modality from the file type unless one is forced.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from config import AppSettings, configure_logging
from core.imaging.codec import is_svg
from core.models.domain import QueryModality
from core.search.pipeline import IconSearchPipeline


def main() -> None:
    """Execute a single match from the command line."""

    parser = argparse.ArgumentParser(description="Match an icon against the IconMatch corpus")
    parser.add_argument("image", type=Path, help="SVG or bitmap file to match")
    parser.add_argument("--manifest", type=Path, default=None, help="Corpus manifest to load")
    parser.add_argument("--modality", choices=[m.value for m in QueryModality], default=None, help="Force the query modality")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    if args.manifest is not None:
        settings.corpus_manifest = args.manifest
    configure_logging(settings)

    data = args.image.read_bytes()
    if args.modality is not None:
        modality = QueryModality(args.modality)
    else:
        modality = QueryModality.VECTOR if is_svg(data) else QueryModality.BITMAP

    pipeline = IconSearchPipeline.from_settings(settings)
    response = pipeline.match(data, modality)

    for result in response.results:
        marker = " (exact)" if result.exact_match else ""
        print(f"id={result.id} mismatch={result.mismatch:.4f}{marker} path={result.path}")
    print(f"{len(response.results)} results in {response.elapsed_ms:.0f} ms")


if __name__ == "__main__":
    main()
