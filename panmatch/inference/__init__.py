"""Inference layer - Musical understanding of the parsed tracks.

This layer decides what the performance is:
- Melody selection (which track is the melody)
- Key detection (tonal center of the melody)

Pipeline: Tracks -> Melody track -> Key
"""

from .key import KeyDetector, KeyInfo, KeyCandidate, UNKNOWN_KEY
from .melody import MelodySelector, set_track_role, find_melody_track

__all__ = [
    # Key detection
    "KeyDetector",
    "KeyInfo",
    "KeyCandidate",
    "UNKNOWN_KEY",
    # Melody selection
    "MelodySelector",
    "set_track_role",
    "find_melody_track",
]
