"""Transposition search - Score every (scale, transposition) pair.

For each catalog scale and each shift t in [-6, +6]:

    coverage   = |shifted melody pitch classes in scale| / |melody pitch classes|
    raw_score  = coverage * 100 - |t| * 0.1 (+ 3 for popular scales)
    penalty    = max(0, (note_count - 9) * 1.5)
    score      = clamp(raw_score - penalty, 0, 100)

Nothing is discarded here; choosing a winner is the selector's job.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from ..core import Track, AnalysisConfig
from ..core.pitch import transpose, transpose_with_octave, pitch_class, pitch_sort_key
from .catalog import ScaleDefinition, SCALES


@dataclass(frozen=True)
class MatchCandidate:
    """One (scale, transposition) evaluation."""

    scale_id: str
    scale_name: str
    scale_notes: Tuple[str, ...]  # Scale pitch classes, lowest note first
    transposition: int
    coverage: float  # 0.0 - 1.0
    score: float  # Penalized, 0 - 100
    raw_score: float  # Coverage + popularity, before the economy penalty
    matched_notes: Tuple[str, ...]  # Transposed full notes in the scale
    missed_notes: Tuple[str, ...]  # Transposed full notes outside the scale
    shifted_notes: Tuple[str, ...]  # Transposed melody pitch classes
    original_key_notes: Tuple[str, ...]  # Melody pitch classes before transposition
    note_count: int  # Notes on the instrument


class ScaleMatcher:
    """Evaluate a melody against every scale at every transposition."""

    def __init__(
        self,
        catalog: Sequence[ScaleDefinition] = SCALES,
        max_transposition: int = 6,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize ScaleMatcher.

        Args:
            catalog: Scales to search
            max_transposition: Shifts from -N to +N semitones are tried
            config: Optional AnalysisConfig with scoring constants
        """
        self.catalog = tuple(catalog)
        self.config = config or AnalysisConfig(max_transposition=max_transposition)

    @property
    def transpositions(self) -> range:
        n = self.config.max_transposition
        return range(-n, n + 1)

    def search_track(self, track: Track) -> List[MatchCandidate]:
        """Search using a track's unique pitch classes and full notes."""
        return self.search(track.pitch_classes(), track.full_note_names())

    def search(
        self,
        pitch_classes: Sequence[str],
        full_notes: Sequence[str],
    ) -> List[MatchCandidate]:
        """
        Build candidates for every scale and transposition.

        Args:
            pitch_classes: Unique melody pitch classes
            full_notes: Unique octave-qualified melody notes

        Returns:
            Candidates in catalog order, transpositions ascending.
            Empty if the melody has no pitch classes.
        """
        pitch_classes = list(dict.fromkeys(pitch_class(pc) for pc in pitch_classes))
        full_notes = list(dict.fromkeys(full_notes))

        if not pitch_classes:
            return []

        candidates = []
        for scale in self.catalog:
            for t in self.transpositions:
                candidates.append(self.evaluate(scale, t, pitch_classes, full_notes))
        return candidates

    def evaluate(
        self,
        scale: ScaleDefinition,
        transposition: int,
        pitch_classes: Sequence[str],
        full_notes: Sequence[str],
    ) -> MatchCandidate:
        """Score a single (scale, transposition) pair."""
        cfg = self.config

        shifted = [transpose(pc, transposition) for pc in pitch_classes]
        matched_count = sum(1 for pc in shifted if pc in scale.pitch_classes)
        coverage = matched_count / len(pitch_classes) if pitch_classes else 0.0

        matched, missed = self._classify_full_notes(scale, transposition, full_notes)

        raw_score = coverage * 100 - abs(transposition) * cfg.transposition_penalty
        if scale.popularity >= cfg.popularity_threshold:
            raw_score += cfg.popularity_bonus

        economy_penalty = max(0.0, (scale.note_count - cfg.economy_base_notes) * cfg.economy_weight)
        score = min(100.0, max(0.0, raw_score - economy_penalty))

        return MatchCandidate(
            scale_id=scale.id,
            scale_name=scale.name,
            scale_notes=scale.sorted_pitch_classes(),
            transposition=transposition,
            coverage=coverage,
            score=score,
            raw_score=raw_score,
            matched_notes=matched,
            missed_notes=missed,
            shifted_notes=tuple(shifted),
            original_key_notes=tuple(pitch_classes),
            note_count=scale.note_count,
        )

    def _classify_full_notes(
        self,
        scale: ScaleDefinition,
        transposition: int,
        full_notes: Sequence[str],
    ) -> Tuple[Tuple[str, ...], Tuple[str, ...]]:
        """Split transposed full notes by pitch-class membership, sorted by pitch."""
        matched, missed = [], []
        for note in full_notes:
            shifted = transpose_with_octave(note, transposition)
            if pitch_class(shifted) in scale.pitch_classes:
                matched.append(shifted)
            else:
                missed.append(shifted)
        return (
            tuple(sorted(matched, key=pitch_sort_key)),
            tuple(sorted(missed, key=pitch_sort_key)),
        )
