"""Tuned analysis constants gathered in one place."""

from dataclasses import dataclass
from typing import Tuple

from .constants import (
    DRUM_CHANNEL,
    MIN_TRACK_NOTES,
    MELODY_BAND,
    DEFAULT_QUANTIZE_DIVISION,
    MAX_TRANSPOSITION,
)


@dataclass
class AnalysisConfig:
    """Configuration for track triage and scale matching.

    The scoring weights and tier thresholds are tuned policy values. Changing
    them changes which scale gets recommended.

    Attributes:
        min_notes: Tracks with fewer notes are dropped (default: 5)
        drum_channel: Channel reserved for percussion (default: 9)
        melody_band: Comfortable (low, high) mean MIDI pitch for a melody
        grid_division: Grid units per quarter note (default: 4, 16th notes)
        key_method: Key profile scoring, "dot" or "pearson"
        max_transposition: Transpositions searched are -N..+N (default: 6)
        transposition_penalty: Score lost per semitone of transposition
        popularity_threshold: Popularity at or above which the bonus applies
        popularity_bonus: Flat bonus for popular scales (default: 3.0)
        economy_base_notes: Scale size from which the economy penalty starts
        economy_weight: Penalty per note above economy_base_notes
        compact_max_notes: Largest scale in the compact tier (default: 10)
        compact_threshold: Score the compact winner needs (default: 85)
        moderate_max_notes: Largest scale in the moderate tier (default: 13)
        moderate_threshold: Score the moderate winner needs (default: 90)
        pro_tie_tolerance: Raw-score gap treated as a tie in pro mode
    """

    min_notes: int = MIN_TRACK_NOTES
    drum_channel: int = DRUM_CHANNEL
    melody_band: Tuple[int, int] = MELODY_BAND
    grid_division: int = DEFAULT_QUANTIZE_DIVISION
    key_method: str = "dot"
    max_transposition: int = MAX_TRANSPOSITION
    transposition_penalty: float = 0.1
    popularity_threshold: float = 0.7
    popularity_bonus: float = 3.0
    economy_base_notes: int = 9
    economy_weight: float = 1.5
    compact_max_notes: int = 10
    compact_threshold: float = 85.0
    moderate_max_notes: int = 13
    moderate_threshold: float = 90.0
    pro_tie_tolerance: float = 0.1
