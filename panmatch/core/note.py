"""Note and track data classes - the units handed over by the MIDI parser."""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional

import numpy as np

from .constants import DEFAULT_VELOCITY
from .pitch import pitch_class, midi_to_note


@dataclass
class Note:
    """Represents a single played note."""

    pitch: int  # MIDI pitch (0-127)
    time: float  # Start time in seconds
    duration: float  # Duration in seconds
    ticks: Optional[int] = None  # Start in ticks
    duration_ticks: Optional[int] = None  # Duration in ticks
    velocity: int = DEFAULT_VELOCITY  # MIDI velocity (0-127)
    name: Optional[str] = None  # e.g. "F#3"; derived from pitch if missing

    def __post_init__(self):
        if self.name is None:
            self.name = self.pitch_name

    @property
    def end(self) -> float:
        """End time in seconds."""
        return self.time + self.duration

    @property
    def pitch_name(self) -> str:
        """Get note name from the MIDI number (e.g., 'C4', 'A#3')."""
        return midi_to_note(self.pitch)

    @property
    def pitch_class(self) -> int:
        """Get pitch class (0-11, where 0=C)."""
        return self.pitch % 12


class TrackRole(Enum):
    """Role of a track within the performance."""
    MELODY = "melody"
    HARMONY = "harmony"
    RHYTHM = "rhythm"
    IGNORE = "ignore"


@dataclass
class Track:
    """An ordered note sequence plus the metadata the parser provides."""

    notes: List[Note]
    name: str = ""
    instrument_family: str = ""
    channel: int = 0
    is_percussion: bool = False
    id: int = 0
    role: TrackRole = TrackRole.HARMONY

    @property
    def note_count(self) -> int:
        return len(self.notes)

    @property
    def mean_pitch(self) -> float:
        """Average MIDI pitch, 0.0 for an empty track."""
        if not self.notes:
            return 0.0
        return float(np.mean([n.pitch for n in self.notes]))

    @property
    def unique_pitch_count(self) -> int:
        """Number of distinct MIDI pitches played."""
        return len({n.pitch for n in self.notes})

    def full_note_names(self) -> List[str]:
        """Unique octave-qualified note names, in first-occurrence order."""
        return list(dict.fromkeys(n.name for n in self.notes if n.name))

    def pitch_classes(self) -> List[str]:
        """Unique pitch classes, in first-occurrence order."""
        return list(dict.fromkeys(pitch_class(name) for name in self.full_note_names()))


@dataclass
class KeySignature:
    """Key declaration carried by the source document."""

    root: str  # Letter as declared (e.g. "C", "F#", "Bb")
    mode: str = "major"  # "major" or "minor"

    def __str__(self) -> str:
        return f"{self.root} {self.mode.capitalize()}"


@dataclass
class Song:
    """An already-parsed performance."""

    tracks: List[Track] = field(default_factory=list)
    name: str = ""
    bpm: Optional[float] = None
    ppq: Optional[int] = None
    duration: float = 0.0
    key_signature: Optional[KeySignature] = None
