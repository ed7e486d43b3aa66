"""Matching layer - Find the handpan scale that fits the melody.

- Scale catalog (static reference data)
- Transposition search (score every scale at every shift)
- Tiered selection (standard / pro recommendation policy)

Pipeline: Melody pitch classes -> Candidates -> MatchResult
"""

from .catalog import (
    ScaleDefinition,
    SCALES,
    DEFAULT_SCALE,
    get_scale,
    find_scale_by_name,
    load_catalog,
)
from .search import ScaleMatcher, MatchCandidate
from .selector import TieredSelector, MatchResult, MatchMode, SelectionTier

__all__ = [
    # Catalog
    "ScaleDefinition",
    "SCALES",
    "DEFAULT_SCALE",
    "get_scale",
    "find_scale_by_name",
    "load_catalog",
    # Search
    "ScaleMatcher",
    "MatchCandidate",
    # Selection
    "TieredSelector",
    "MatchResult",
    "MatchMode",
    "SelectionTier",
]
