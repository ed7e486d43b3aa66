"""Input layer - Song loading (MIDI via pretty_midi, JSON documents)."""

from .loader import SongLoader

__all__ = ["SongLoader"]
