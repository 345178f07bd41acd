# Path: config/settings.py
# Purpose: Provide typed application configuration models.
# Layer: config.
# Details: Centralizes settings for normalization, ranking, the corpus manifest, HTTP and logging.

from __future__ import annotations

import os
from pathlib import Path
from typing import List

from pydantic import BaseModel, Field

ENV_PREFIX = "ICONMATCH_"


class NormalizerSettings(BaseModel):
    """Settings describing how query and corpus images are reduced to canonical rasters."""

    canonical_size: int = Field(default=28, gt=0, description="Edge length of the square canonical raster.")
    detection_strategy: str = Field(
        default="color_tolerance",
        description="Background detection strategy used by subject isolation (color_tolerance or grayscale_threshold).",
    )
    background_tolerance: int = Field(
        default=25, ge=0, le=255, description="Per-channel distance below which a pixel counts as background."
    )
    grayscale_threshold: int = Field(
        default=220, ge=0, le=255, description="Luminance below which a pixel counts as foreground."
    )
    recolor_light_strokes: bool = Field(
        default=False, description="Recolor light foreground pixels to black before resizing isolated subjects."
    )


class RankingSettings(BaseModel):
    """Settings controlling similarity scoring and result filtering."""

    pixel_threshold: float = Field(
        default=0.1, ge=0.0, le=1.0, description="Per-pixel color distance tolerated by the pixel comparison."
    )
    include_aa: bool = Field(default=False, description="Count anti-aliased pixels as mismatches.")
    vector_threshold: float = Field(
        default=0.15, gt=0.0, le=1.0, description="Mismatch ratio cut-off for vector-derived queries."
    )
    bitmap_threshold: float = Field(
        default=0.25, gt=0.0, le=1.0, description="Mismatch ratio cut-off for bitmap-derived queries."
    )
    result_limit: int = Field(default=10, gt=0, description="Maximum number of ranked results returned.")
    max_workers: int = Field(default=8, gt=0, description="Upper bound on concurrent corpus comparisons per query.")
    include_path: bool = Field(default=False, description="Attach corpus source paths to results for diagnostics.")


class ApiSettings(BaseModel):
    """Settings for the HTTP layer."""

    host: str = Field(default="0.0.0.0", description="Interface the HTTP server binds to.")
    port: int = Field(default=3001, description="Port the HTTP server listens on.")
    cors_origins: List[str] = Field(
        default_factory=lambda: ["http://localhost:3000"], description="Origins allowed by the CORS policy."
    )
    max_payload_bytes: int = Field(default=2 * 1024 * 1024, gt=0, description="Largest accepted userInput size.")


class AppSettings(BaseModel):
    """Top-level application settings shared across services and interfaces."""

    corpus_manifest: Path = Field(
        default=Path("storage/icons/manifest.json"), description="JSON manifest listing corpus icons."
    )
    normalizer: NormalizerSettings = Field(default_factory=NormalizerSettings)
    ranking: RankingSettings = Field(default_factory=RankingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    log_level: str = Field(default="INFO", description="Verbosity level for application logs.")

    @classmethod
    def from_env(cls) -> "AppSettings":
        """Instantiate settings, applying ICONMATCH_* environment overrides when present."""

        settings = cls()
        env = os.environ

        if f"{ENV_PREFIX}CORPUS_MANIFEST" in env:
            settings.corpus_manifest = Path(env[f"{ENV_PREFIX}CORPUS_MANIFEST"])
        if f"{ENV_PREFIX}LOG_LEVEL" in env:
            settings.log_level = env[f"{ENV_PREFIX}LOG_LEVEL"]
        if f"{ENV_PREFIX}PORT" in env:
            settings.api.port = int(env[f"{ENV_PREFIX}PORT"])
        if f"{ENV_PREFIX}CANONICAL_SIZE" in env:
            settings.normalizer.canonical_size = int(env[f"{ENV_PREFIX}CANONICAL_SIZE"])
        if f"{ENV_PREFIX}DETECTION_STRATEGY" in env:
            settings.normalizer.detection_strategy = env[f"{ENV_PREFIX}DETECTION_STRATEGY"]
        if f"{ENV_PREFIX}MAX_WORKERS" in env:
            settings.ranking.max_workers = int(env[f"{ENV_PREFIX}MAX_WORKERS"])

        # Plain attribute assignment skips field validation, so re-validate once.
        return cls.model_validate(settings.model_dump())


__all__ = ["AppSettings", "ApiSettings", "NormalizerSettings", "RankingSettings"]
