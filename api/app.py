# Path: api/app.py
# Purpose: Expose a FastAPI application for icon lookup.
# Layer: api.
# Details: Provides health checks and the SVG/PNG match endpoints delegating to the core pipeline.

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from pydantic import BaseModel

from config.settings import AppSettings
from core.errors import DecodeError
from core.search.pipeline import IconSearchPipeline

from .transport import decode_data_uri, encode_markup

logger = logging.getLogger(__name__)

FAILURE_MESSAGE = "An error occurred while processing your request."


class MatchRequest(BaseModel):
    """Body of both match endpoints."""

    userInput: str


def create_app(pipeline: Optional[IconSearchPipeline] = None, settings: Optional[AppSettings] = None):  # type: ignore[override]
    """Create a FastAPI app instance configured with the provided search pipeline."""

    from fastapi import FastAPI, HTTPException, Request
    from fastapi.middleware.cors import CORSMiddleware
    from fastapi.responses import JSONResponse

    settings = settings or AppSettings()
    app = FastAPI(title="IconMatch API", version="0.1.0")

    @app.middleware("http")
    async def limit_body_size(request: Request, call_next):
        """Reject bodies whose declared length exceeds the limit before they are read."""

        declared = request.headers.get("content-length")
        if declared is not None and declared.isdigit() and int(declared) > settings.api.max_payload_bytes:
            return JSONResponse(status_code=413, content={"detail": "Request payload is too large."})
        return await call_next(request)

    # CORS is added last so it wraps the size check.
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.api.cors_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["Content-Type"],
    )

    @app.exception_handler(DecodeError)
    def decode_error_handler(request: Request, exc: DecodeError) -> JSONResponse:
        logger.error("Error with API call %s: %s", request.url.path, exc, exc_info=exc)
        return JSONResponse(status_code=500, content={"message": FAILURE_MESSAGE, "error": str(exc)})

    def require_pipeline() -> IconSearchPipeline:
        if pipeline is None:
            raise HTTPException(status_code=500, detail="Search pipeline is not configured.")
        return pipeline

    def check_input_length(payload: MatchRequest) -> None:
        # Chunked bodies carry no content-length, so the field itself is bounded too.
        if len(payload.userInput.encode("utf-8")) > settings.api.max_payload_bytes:
            raise HTTPException(status_code=413, detail="Request payload is too large.")

    @app.get("/health")
    def health() -> Dict[str, Any]:
        """Return a simple health status payload."""

        corpus_size = len(pipeline.engine.corpus) if pipeline is not None else 0
        return {"status": "ok", "corpus_size": corpus_size}

    @app.post("/getFilteredIconsFromSVG")
    def match_svg(payload: MatchRequest) -> Dict[str, Any]:
        """Rank the corpus against SVG markup."""

        check_input_length(payload)
        response = require_pipeline().match_vector(encode_markup(payload.userInput))
        return response.to_payload(include_path=settings.ranking.include_path)

    @app.post("/getFilteredIconsFromPNG")
    def match_png(payload: MatchRequest) -> Dict[str, Any]:
        """Rank the corpus against a base64 data-URI bitmap."""

        check_input_length(payload)
        response = require_pipeline().match_bitmap(decode_data_uri(payload.userInput))
        return response.to_payload(include_path=settings.ranking.include_path)

    return app
