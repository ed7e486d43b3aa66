"""Note quantization - Snap the melody track to a rhythmic grid."""

import warnings
from typing import Optional, Union

from ..core import Note, Track, DEFAULT_TEMPO
from ..core.constants import DEFAULT_QUANTIZE_DIVISION

Number = Union[int, float]


class Quantizer:
    """Quantize note timings to a sixteenth-note grid.

    Both time domains are snapped independently: seconds (using tempo) and
    ticks (using the file's pulses per quarter note). Durations are floored at
    half a grid unit so no note collapses to zero length. Quantizing already
    quantized notes changes nothing.
    """

    def __init__(
        self,
        tempo: Optional[float] = DEFAULT_TEMPO,
        ppq: Optional[int] = 480,
        quantize_division: int = DEFAULT_QUANTIZE_DIVISION,
    ):
        """
        Initialize Quantizer.

        Args:
            tempo: Tempo in BPM
            ppq: Ticks per quarter note of the source file
            quantize_division: Grid units per quarter note (4 for 16th notes)
        """
        self.tempo = tempo
        self.ppq = ppq
        self.quantize_division = quantize_division

    @property
    def enabled(self) -> bool:
        """Quantization needs both a tempo and a tick resolution."""
        return bool(self.tempo) and bool(self.ppq)

    @property
    def beat_duration(self) -> float:
        """Duration of one beat in seconds."""
        return 60.0 / self.tempo

    @property
    def grid_duration(self) -> float:
        """Duration of one grid unit in seconds."""
        return self.beat_duration / self.quantize_division

    @property
    def grid_ticks(self) -> Number:
        """Length of one grid unit in ticks."""
        if self.ppq % self.quantize_division == 0:
            return self.ppq // self.quantize_division
        return self.ppq / self.quantize_division

    def quantize(self, track: Track) -> Track:
        """
        Quantize a track's notes in place.

        Args:
            track: Track to rewrite (the melody track)

        Returns:
            The same track
        """
        if not self.enabled:
            warnings.warn(
                f"Quantization skipped for '{track.name}': "
                f"tempo={self.tempo}, ppq={self.ppq}",
                stacklevel=2,
            )
            return track

        for note in track.notes:
            self.quantize_note(note)
        return track

    def quantize_note(self, note: Note) -> Note:
        """Snap one note's start and duration in both time domains."""
        grid = self.grid_duration
        note.time = self._snap_to_grid(note.time, grid)
        note.duration = max(self._snap_to_grid(note.duration, grid), grid / 2)

        ticks = self.grid_ticks
        if note.ticks is not None:
            note.ticks = self._snap_to_grid(note.ticks, ticks)
        if note.duration_ticks is not None:
            note.duration_ticks = max(self._snap_to_grid(note.duration_ticks, ticks), self._half(ticks))
        return note

    def _half(self, grid: Number) -> Number:
        """Half a grid unit, kept integral when the grid is."""
        if isinstance(grid, int):
            return grid // 2
        return grid / 2

    def _snap_to_grid(self, value: Number, grid: Number) -> Number:
        """Snap a value to the nearest grid position."""
        grid_units = round(value / grid)
        return grid_units * grid
