"""Tiered selection - Pick one recommendation from all candidates.

Two policies:
- standard: prefer compact instruments. The best compact (<=10 notes)
  candidate wins at score >= 85, else the best moderate (<=13 notes) one at
  score >= 90, else the best overall.
- pro: highest raw score regardless of instrument size; near-ties
  (within 0.1) go to the smaller instrument.
"""

from dataclasses import dataclass, fields
from enum import Enum
from functools import cmp_to_key
from typing import List, Optional, Sequence, Tuple

from ..core import AnalysisConfig
from .search import MatchCandidate


class MatchMode(Enum):
    """Selection policy."""
    STANDARD = "standard"
    PRO = "pro"


class SelectionTier(Enum):
    """Which rule produced the recommendation."""
    COMPACT = "compact"
    MODERATE = "moderate"
    ALL = "all"
    PRO = "pro"
    DEFAULT = "default"


@dataclass(frozen=True)
class MatchResult(MatchCandidate):
    """The chosen candidate plus the detected key."""

    key: str = "Unknown"
    mode: MatchMode = MatchMode.STANDARD
    tier: SelectionTier = SelectionTier.ALL

    @classmethod
    def from_candidate(
        cls,
        candidate: MatchCandidate,
        key: str,
        mode: MatchMode,
        tier: SelectionTier,
    ) -> "MatchResult":
        values = {f.name: getattr(candidate, f.name) for f in fields(MatchCandidate)}
        return cls(**values, key=key, mode=mode, tier=tier)


class TieredSelector:
    """Apply the standard or pro policy over match candidates."""

    def __init__(self, config: Optional[AnalysisConfig] = None):
        """
        Initialize TieredSelector.

        Args:
            config: Optional AnalysisConfig with tier sizes and thresholds
        """
        self.config = config or AnalysisConfig()

    def select(
        self,
        candidates: Sequence[MatchCandidate],
        mode: MatchMode = MatchMode.STANDARD,
        key: str = "Unknown",
    ) -> Optional[MatchResult]:
        """
        Choose the recommended candidate.

        Args:
            candidates: All (scale, transposition) candidates
            mode: MatchMode or its string value
            key: Detected key to attach to the result

        Returns:
            MatchResult, or None when there are no candidates

        Raises:
            ValueError: For an unknown mode string
        """
        mode = MatchMode(mode)
        if not candidates:
            return None

        if mode is MatchMode.PRO:
            best, tier = self.rank_pro(candidates)[0], SelectionTier.PRO
        else:
            best, tier = self._select_standard(candidates)

        return MatchResult.from_candidate(best, key=key, mode=mode, tier=tier)

    def rank_pro(self, candidates: Sequence[MatchCandidate]) -> List[MatchCandidate]:
        """Candidates by raw score, smaller instruments first on near-ties."""
        tolerance = self.config.pro_tie_tolerance

        def compare(a: MatchCandidate, b: MatchCandidate) -> int:
            diff = b.raw_score - a.raw_score
            if abs(diff) > tolerance:
                return 1 if diff > 0 else -1
            return a.note_count - b.note_count

        return sorted(candidates, key=cmp_to_key(compare))

    def rank_standard(self, candidates: Sequence[MatchCandidate]) -> List[MatchCandidate]:
        """Candidates by penalized score, stable among equal scores."""
        return sorted(candidates, key=lambda c: c.score, reverse=True)

    def _select_standard(
        self, candidates: Sequence[MatchCandidate]
    ) -> Tuple[MatchCandidate, SelectionTier]:
        cfg = self.config

        compact = self.rank_standard([c for c in candidates if c.note_count <= cfg.compact_max_notes])
        if compact and compact[0].score >= cfg.compact_threshold:
            return compact[0], SelectionTier.COMPACT

        moderate = self.rank_standard([c for c in candidates if c.note_count <= cfg.moderate_max_notes])
        if moderate and moderate[0].score >= cfg.moderate_threshold:
            return moderate[0], SelectionTier.MODERATE

        return self.rank_standard(candidates)[0], SelectionTier.ALL
