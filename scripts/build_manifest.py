# Path: scripts/build_manifest.py
# Purpose: CLI tool to scan an icon folder and write the corpus manifest.
# Layer: scripts.
# Details: Every icon is normalized once so unreadable files are reported before the server ever loads them.

from __future__ import annotations

import argparse
import json
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from tqdm import tqdm

from config import AppSettings, configure_logging
from core.corpus.index import CorpusIndex
from core.corpus.scanner import IconScanner
from core.errors import DecodeError
from core.imaging.normalizer import ImageNormalizer


def main() -> None:
    """Scan a folder of icons and write a manifest next to it."""

    parser = argparse.ArgumentParser(description="Build the IconMatch corpus manifest")
    parser.add_argument("--folder", type=Path, default=Path("storage/icons"), help="Folder containing corpus icons")
    parser.add_argument("--output", type=Path, default=None, help="Manifest path (defaults to <folder>/manifest.json)")
    parser.add_argument("--skip-invalid", action="store_true", help="Leave icons that fail to decode out of the manifest")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    configure_logging(settings)
    output = args.output or args.folder / "manifest.json"

    entries = IconScanner(args.folder.resolve()).scan()
    normalizer = ImageNormalizer.from_settings(settings.normalizer)

    valid = []
    failures = 0
    for entry in tqdm(entries, desc="Validating icons", unit="icon"):
        try:
            normalizer.normalize_direct(entry.read_bytes())
        except (OSError, DecodeError) as exc:
            failures += 1
            tqdm.write(f"{entry.id}: {exc}")
            if args.skip_invalid:
                continue
        valid.append(entry)

    index = CorpusIndex(valid)
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(json.dumps(index.to_manifest(output.parent.resolve()), indent=2), encoding="utf-8")
    print(f"Wrote {len(index)} icons to {output} ({failures} failed to decode)")


if __name__ == "__main__":
    main()
