# Path: scripts/serve.py
# Purpose: Start the HTTP server for icon lookup.
# Layer: scripts.
# Details: Loads settings and the corpus manifest once, then serves the FastAPI app with uvicorn.

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Ensure project root is on sys.path when running as a script.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from api.app import create_app
from config import AppSettings, configure_logging
from core.search.pipeline import IconSearchPipeline


def main() -> None:
    """Load the corpus and serve the match endpoints."""

    parser = argparse.ArgumentParser(description="Serve the IconMatch HTTP API")
    parser.add_argument("--manifest", type=Path, default=None, help="Corpus manifest to load")
    parser.add_argument("--host", type=str, default=None, help="Interface to bind")
    parser.add_argument("--port", type=int, default=None, help="Port to listen on")
    args = parser.parse_args()

    settings = AppSettings.from_env()
    if args.manifest is not None:
        settings.corpus_manifest = args.manifest
    if args.host is not None:
        settings.api.host = args.host
    if args.port is not None:
        settings.api.port = args.port

    configure_logging(settings)
    pipeline = IconSearchPipeline.from_settings(settings)
    app = create_app(pipeline, settings)

    import uvicorn

    uvicorn.run(app, host=settings.api.host, port=settings.api.port)


if __name__ == "__main__":
    main()
