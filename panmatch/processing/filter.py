"""Track filtering - Drop tracks that cannot carry a melody."""

from typing import List, Optional, Tuple

from ..core import Track, TrackRole, AnalysisConfig


class TrackFilter:
    """Remove structurally unusable tracks.

    A track is dropped when it has fewer than ``min_notes`` notes (usually an
    export artifact rather than a real part) or when it is percussion, either
    flagged by the parser or playing on the reserved drum channel.
    """

    def __init__(
        self,
        min_notes: int = 5,
        drum_channel: int = 9,
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize TrackFilter.

        Args:
            min_notes: Minimum number of notes a track needs to be kept
            drum_channel: Zero-based channel reserved for drums
            config: Optional AnalysisConfig overriding the arguments
        """
        if config is not None:
            min_notes = config.min_notes
            drum_channel = config.drum_channel
        self.min_notes = min_notes
        self.drum_channel = drum_channel

    def is_percussion(self, track: Track) -> bool:
        return track.is_percussion or track.channel == self.drum_channel

    def is_usable(self, track: Track) -> bool:
        """Whether a track survives filtering."""
        return track.note_count >= self.min_notes and not self.is_percussion(track)

    def filter(self, tracks: List[Track]) -> List[Track]:
        """
        Keep usable tracks, preserving order.

        Args:
            tracks: Raw track list

        Returns:
            New list containing only usable tracks
        """
        return [t for t in tracks if self.is_usable(t)]

    def split(self, tracks: List[Track]) -> Tuple[List[Track], List[Track]]:
        """
        Partition tracks into (kept, excluded).

        Excluded percussion tracks are tagged RHYTHM, sparse ones IGNORE.
        """
        kept, excluded = [], []
        for track in tracks:
            if self.is_usable(track):
                kept.append(track)
                continue
            track.role = TrackRole.RHYTHM if self.is_percussion(track) else TrackRole.IGNORE
            excluded.append(track)
        return kept, excluded
