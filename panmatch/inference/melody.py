"""Melody selection - Decide which track carries the melody."""

import numpy as np
from typing import List, Optional, Tuple

from ..core import Track, TrackRole, AnalysisConfig


class MelodySelector:
    """Score tracks and promote the most melodic one.

    score = log(notes + 1) * 20            (activity)
          + range term                     (+30 in band, -20 below, -10 above)
          + log(unique pitches + 1) * 10   (melodic variance)
    """

    ACTIVITY_WEIGHT = 20.0
    VARIANCE_WEIGHT = 10.0
    IN_BAND_BONUS = 30.0
    BELOW_BAND_PENALTY = -20.0
    ABOVE_BAND_PENALTY = -10.0

    def __init__(
        self,
        melody_band: Tuple[int, int] = (60, 84),
        config: Optional[AnalysisConfig] = None,
    ):
        """
        Initialize MelodySelector.

        Args:
            melody_band: Inclusive (low, high) MIDI range for a comfortable mean pitch
            config: Optional AnalysisConfig overriding the arguments
        """
        if config is not None:
            melody_band = config.melody_band
        self.melody_band = melody_band

    def score(self, track: Track) -> float:
        """Melody likelihood score of a single track."""
        activity = np.log(track.note_count + 1) * self.ACTIVITY_WEIGHT
        variance = np.log(track.unique_pitch_count + 1) * self.VARIANCE_WEIGHT
        return float(activity + self._range_term(track.mean_pitch) + variance)

    def _range_term(self, mean_pitch: float) -> float:
        low, high = self.melody_band
        if mean_pitch < low:
            return self.BELOW_BAND_PENALTY
        if mean_pitch > high:
            return self.ABOVE_BAND_PENALTY
        return self.IN_BAND_BONUS

    def scores(self, tracks: List[Track]) -> List[float]:
        return [self.score(t) for t in tracks]

    def select(self, tracks: List[Track]) -> Optional[Track]:
        """
        Promote the highest scoring track to the melody role.

        Ties go to the earliest track. Other tracks keep their role.

        Args:
            tracks: Filtered tracks

        Returns:
            The melody track, or None for an empty list
        """
        best_index = -1
        best_score = -np.inf
        for i, score in enumerate(self.scores(tracks)):
            if score > best_score:
                best_score = score
                best_index = i

        if best_index == -1:
            return None

        return _assign_role(tracks, tracks[best_index], TrackRole.MELODY)


def set_track_role(tracks: List[Track], track_id: int, role: TrackRole) -> Track:
    """
    Assign a role to the track with the given id.

    The melody role stays exclusive: promoting a track demotes any previous
    melody track to HARMONY.

    Raises:
        KeyError: If no track has this id
    """
    target = next((t for t in tracks if t.id == track_id), None)
    if target is None:
        raise KeyError(f"No track with id {track_id}")
    return _assign_role(tracks, target, role)


def _assign_role(tracks: List[Track], target: Track, role: TrackRole) -> Track:
    if role is TrackRole.MELODY:
        for track in tracks:
            if track is not target and track.role is TrackRole.MELODY:
                track.role = TrackRole.HARMONY
    target.role = role
    return target


def find_melody_track(tracks: List[Track]) -> Optional[Track]:
    """The MELODY track, else the first track that is not RHYTHM or IGNORE."""
    for track in tracks:
        if track.role is TrackRole.MELODY:
            return track
    for track in tracks:
        if track.role not in (TrackRole.RHYTHM, TrackRole.IGNORE):
            return track
    return None
