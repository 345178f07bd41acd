# Path: config/__init__.py
# Purpose: Package initializer for configuration module.
# Layer: config.
# Details: Exposes settings models and the logging bootstrap for application-wide configuration.

from .logging import configure_logging
from .settings import ApiSettings, AppSettings, NormalizerSettings, RankingSettings

__all__ = ["AppSettings", "ApiSettings", "NormalizerSettings", "RankingSettings", "configure_logging"]
