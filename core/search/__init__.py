# Path: core/search/__init__.py
# Purpose: Package initializer for query strategies, ranking, and pipeline orchestration.
# Layer: core/search.
# Details: Exposes strategy interfaces, the ranking engine, and the main pipeline entrypoint.

from .strategies import BitmapQuery, QueryStrategy, VectorQuery
from .ranking import RankingEngine
from .pipeline import IconSearchPipeline

__all__ = [
    "IconSearchPipeline",
    "RankingEngine",
    "QueryStrategy",
    "VectorQuery",
    "BitmapQuery",
]
