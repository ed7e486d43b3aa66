"""Tests for track filtering and melody quantization."""

import pytest

from panmatch.core import Note, Track, TrackRole, AnalysisConfig
from panmatch.processing import TrackFilter, Quantizer


def make_track(n_notes: int, pitch: int = 60, **kwargs) -> Track:
    """Create a track of n_notes quarter notes at 120 BPM / 480 PPQ."""
    notes = [
        Note(pitch=pitch + i % 5, time=i * 0.5, duration=0.5, ticks=i * 480, duration_ticks=480)
        for i in range(n_notes)
    ]
    return Track(notes=notes, **kwargs)


def timing(track: Track):
    return [(n.time, n.duration, n.ticks, n.duration_ticks) for n in track.notes]


class TestTrackFilter:
    """Tests for TrackFilter."""

    def test_four_notes_removed(self):
        result = TrackFilter().filter([make_track(4)])
        assert result == []

    def test_five_notes_retained(self):
        track = make_track(5)
        result = TrackFilter().filter([track])
        assert result == [track]

    def test_percussion_flag_removed(self):
        track = make_track(20, is_percussion=True)
        assert TrackFilter().filter([track]) == []

    def test_drum_channel_removed(self):
        track = make_track(20, channel=9)
        assert TrackFilter().filter([track]) == []

    def test_other_channels_kept(self):
        tracks = [make_track(20, channel=ch) for ch in (0, 1, 8, 10, 15)]
        assert len(TrackFilter().filter(tracks)) == 5

    def test_order_preserved(self):
        tracks = [make_track(10, name="a"), make_track(2, name="b"), make_track(7, name="c")]
        result = TrackFilter().filter(tracks)
        assert [t.name for t in result] == ["a", "c"]

    def test_does_not_mutate_input(self):
        tracks = [make_track(10), make_track(3)]
        before = timing(tracks[0])
        TrackFilter().filter(tracks)
        assert len(tracks) == 2
        assert timing(tracks[0]) == before

    def test_split_tags_excluded_tracks(self):
        drums = make_track(30, channel=9, name="drums")
        sparse = make_track(2, name="fx")
        lead = make_track(12, name="lead")

        kept, excluded = TrackFilter().split([drums, sparse, lead])

        assert kept == [lead]
        assert excluded == [drums, sparse]
        assert drums.role is TrackRole.RHYTHM
        assert sparse.role is TrackRole.IGNORE
        assert lead.role is TrackRole.HARMONY

    def test_config_overrides(self):
        config = AnalysisConfig(min_notes=3, drum_channel=15)
        track_filter = TrackFilter(config=config)
        assert track_filter.filter([make_track(3)]) != []
        assert track_filter.filter([make_track(10, channel=9)]) != []
        assert track_filter.filter([make_track(10, channel=15)]) == []

    def test_empty_input(self):
        assert TrackFilter().filter([]) == []


class TestQuantizer:
    """Tests for Quantizer."""

    def test_grid(self):
        quantizer = Quantizer(tempo=120.0, ppq=480)
        assert quantizer.grid_duration == 0.125
        assert quantizer.grid_ticks == 120

    def test_snaps_start_and_duration(self):
        note = Note(pitch=60, time=0.48, duration=0.2, ticks=470, duration_ticks=130)
        track = Track(notes=[note])

        Quantizer(tempo=120.0, ppq=480).quantize(track)

        assert note.time == pytest.approx(0.5)
        assert note.duration == pytest.approx(0.25)
        assert note.ticks == 480
        assert note.duration_ticks == 120

    def test_time_and_ticks_snapped_independently(self):
        # Ticks say beat 2, seconds say beat 1: each domain keeps its own answer
        note = Note(pitch=60, time=0.49, duration=0.5, ticks=965, duration_ticks=480)
        Quantizer(tempo=120.0, ppq=480).quantize(Track(notes=[note]))

        assert note.time == pytest.approx(0.5)
        assert note.ticks == 960

    def test_duration_floored_at_half_grid(self):
        note = Note(pitch=60, time=0.0, duration=0.01, ticks=0, duration_ticks=5)
        Quantizer(tempo=120.0, ppq=480).quantize(Track(notes=[note]))

        assert note.duration == pytest.approx(0.0625)
        assert note.duration_ticks == 60
        assert isinstance(note.duration_ticks, int)

    def test_tick_floor_integral_on_odd_grid(self):
        note = Note(pitch=60, time=0.0, duration=0.01, ticks=7, duration_ticks=3)
        quantizer = Quantizer(tempo=120.0, ppq=100)

        quantizer.quantize(Track(notes=[note]))
        assert note.ticks == 0
        assert note.duration_ticks == 12
        assert isinstance(note.duration_ticks, int)

        quantizer.quantize(Track(notes=[note]))
        assert note.duration_ticks == 12

    def test_idempotent(self):
        notes = [
            Note(pitch=60 + i, time=i * 0.37, duration=0.11 * (i + 1), ticks=i * 333, duration_ticks=17 * i)
            for i in range(12)
        ]
        track = Track(notes=notes)
        quantizer = Quantizer(tempo=100.0, ppq=96)

        quantizer.quantize(track)
        once = timing(track)
        quantizer.quantize(track)
        twice = timing(track)

        assert once == twice

    def test_missing_tick_fields_left_alone(self):
        note = Note(pitch=60, time=0.3, duration=0.3)
        Quantizer(tempo=120.0, ppq=480).quantize(Track(notes=[note]))

        assert note.ticks is None
        assert note.duration_ticks is None
        assert note.time == pytest.approx(0.25)

    @pytest.mark.parametrize("tempo, ppq", [(None, 480), (0, 480), (120.0, None), (120.0, 0)])
    def test_skipped_without_tempo_or_resolution(self, tempo, ppq):
        track = Track(notes=[Note(pitch=60, time=0.31, duration=0.07, ticks=301, duration_ticks=7)])
        before = timing(track)

        with pytest.warns(UserWarning, match="Quantization skipped"):
            Quantizer(tempo=tempo, ppq=ppq).quantize(track)

        assert timing(track) == before

    def test_returns_same_track(self):
        track = make_track(5)
        assert Quantizer().quantize(track) is track
