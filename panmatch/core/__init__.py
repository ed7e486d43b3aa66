"""Core types and constants for panmatch."""

from .note import Note, Track, TrackRole, KeySignature, Song
from .config import AnalysisConfig
from .constants import (
    PITCH_NAMES,
    DEFAULT_TEMPO,
    DRUM_CHANNEL,
)
from .pitch import (
    pitch_class,
    transpose,
    transpose_with_octave,
    note_to_midi,
    midi_to_note,
    pitch_sort_key,
)

__all__ = [
    "Note",
    "Track",
    "TrackRole",
    "KeySignature",
    "Song",
    "AnalysisConfig",
    "PITCH_NAMES",
    "DEFAULT_TEMPO",
    "DRUM_CHANNEL",
    "pitch_class",
    "transpose",
    "transpose_with_octave",
    "note_to_midi",
    "midi_to_note",
    "pitch_sort_key",
]
