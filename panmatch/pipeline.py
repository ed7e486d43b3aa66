"""Analysis pipeline - From parsed tracks to a scale recommendation.

Two stages, callable separately so matching can be re-run in another mode
without filtering, quantizing and detecting the key again:

    process(song)            filter -> melody -> quantize -> key
    match(processed, mode)   transposition search -> tiered selection
"""

import warnings
from dataclasses import dataclass, field
from typing import List, Optional, Sequence, Tuple

from .core import Song, Track, TrackRole, KeySignature, AnalysisConfig
from .processing import TrackFilter, Quantizer
from .inference import KeyDetector, MelodySelector, find_melody_track, set_track_role
from .matching import (
    SCALES,
    ScaleDefinition,
    ScaleMatcher,
    MatchCandidate,
    TieredSelector,
    MatchResult,
    MatchMode,
    SelectionTier,
)


@dataclass
class ProcessedSong:
    """Tracks after triage, with the melody tagged and quantized."""

    name: str
    tracks: List[Track]  # Retained tracks, melody tagged
    excluded: List[Track] = field(default_factory=list)  # Dropped tracks
    melody: Optional[Track] = None
    key: str = "Unknown"
    bpm: Optional[float] = None
    ppq: Optional[int] = None
    duration: float = 0.0
    key_signature: Optional[KeySignature] = None

    @property
    def is_empty(self) -> bool:
        """No usable track survived filtering."""
        return self.melody is None


class SongAnalyzer:
    """Run track triage and scale matching on a parsed song."""

    def __init__(
        self,
        config: Optional[AnalysisConfig] = None,
        catalog: Sequence[ScaleDefinition] = SCALES,
    ):
        """
        Initialize SongAnalyzer.

        Args:
            config: AnalysisConfig with all tuned constants
            catalog: Scales to match against
        """
        self.config = config or AnalysisConfig()
        self.catalog = tuple(catalog)

        self.track_filter = TrackFilter(config=self.config)
        self.melody_selector = MelodySelector(config=self.config)
        self.key_detector = KeyDetector(method=self.config.key_method)
        self.matcher = ScaleMatcher(catalog=self.catalog, config=self.config)
        self.selector = TieredSelector(config=self.config)

    def process(self, song: Song) -> ProcessedSong:
        """
        Filter tracks, pick and quantize the melody, detect the key.

        Args:
            song: Parsed song

        Returns:
            ProcessedSong; melody is None if every track was filtered out
        """
        tracks, excluded = self.track_filter.split(song.tracks)
        if not tracks:
            warnings.warn(
                f"No usable tracks in '{song.name}' "
                f"({len(excluded)} filtered out)",
                stacklevel=2,
            )

        processed = ProcessedSong(
            name=song.name,
            tracks=tracks,
            excluded=excluded,
            bpm=song.bpm,
            ppq=song.ppq,
            duration=song.duration,
            key_signature=song.key_signature,
        )
        self._adopt_melody(processed, self.melody_selector.select(tracks))
        return processed

    def set_melody(self, processed: ProcessedSong, track_id: int) -> Track:
        """
        Promote a retained track to melody and redo quantization and key.

        Args:
            processed: Output of process(), updated in place
            track_id: Id of the track to promote

        Returns:
            The new melody track

        Raises:
            KeyError: If no retained track has this id
        """
        melody = set_track_role(processed.tracks, track_id, TrackRole.MELODY)
        self._adopt_melody(processed, melody)
        return melody

    def _adopt_melody(self, processed: ProcessedSong, melody: Optional[Track]) -> None:
        if melody is not None:
            quantizer = Quantizer(
                tempo=processed.bpm,
                ppq=processed.ppq,
                quantize_division=self.config.grid_division,
            )
            quantizer.quantize(melody)

        processed.melody = melody
        processed.key = self.key_detector.detect(
            melody.notes if melody is not None else [],
            processed.key_signature,
        )

    def match(
        self,
        processed: ProcessedSong,
        mode: MatchMode = MatchMode.STANDARD,
    ) -> MatchResult:
        """
        Recommend a scale for the processed song's melody.

        The melody is the track holding the MELODY role, else the first
        track that is not RHYTHM or IGNORE, so manual role changes are
        honored. A melody changed through set_track_role is quantized and
        keyed here and written back to the processed song. Without a melody
        the first catalog scale is returned with a zero score.

        Args:
            processed: Output of process()
            mode: MatchMode or "standard" / "pro"

        Returns:
            MatchResult
        """
        mode = MatchMode(mode)
        melody = self._current_melody(processed)

        key = processed.key
        candidates = self.matcher.search_track(melody) if melody is not None else []
        result = self.selector.select(candidates, mode=mode, key=key)
        if result is None:
            return self._default_result(key, mode)
        return result

    def analyze(
        self,
        song: Song,
        mode: MatchMode = MatchMode.STANDARD,
    ) -> Tuple[ProcessedSong, MatchResult]:
        """Run both stages."""
        processed = self.process(song)
        return processed, self.match(processed, mode)

    def recommend(
        self,
        processed: ProcessedSong,
        mode: MatchMode = MatchMode.STANDARD,
    ) -> Tuple[str, MatchResult]:
        """Scale id of the recommendation plus its details."""
        result = self.match(processed, mode)
        return result.scale_id, result

    def candidates(self, processed: ProcessedSong) -> List[MatchCandidate]:
        """Every (scale, transposition) candidate for the current melody."""
        melody = self._current_melody(processed)
        if melody is None:
            return []
        return self.matcher.search_track(melody)

    def _current_melody(self, processed: ProcessedSong) -> Optional[Track]:
        melody = find_melody_track(processed.tracks)
        if melody is not processed.melody:
            self._adopt_melody(processed, melody)
        return melody

    def _default_result(self, key: str, mode: MatchMode) -> MatchResult:
        scale = self.catalog[0]
        candidate = MatchCandidate(
            scale_id=scale.id,
            scale_name=scale.name,
            scale_notes=scale.sorted_pitch_classes(),
            transposition=0,
            coverage=0.0,
            score=0.0,
            raw_score=0.0,
            matched_notes=(),
            missed_notes=(),
            shifted_notes=(),
            original_key_notes=(),
            note_count=scale.note_count,
        )
        return MatchResult.from_candidate(
            candidate, key=key, mode=mode, tier=SelectionTier.DEFAULT
        )
