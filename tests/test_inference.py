"""Tests for melody selection and key detection."""

import numpy as np
import pytest

from panmatch.core import Note, Track, TrackRole, KeySignature, PITCH_NAMES
from panmatch.inference import (
    KeyDetector,
    MelodySelector,
    UNKNOWN_KEY,
    set_track_role,
    find_melody_track,
)


def notes_from(names_and_durations):
    """Build sequential notes from (name, duration) pairs in octave 4."""
    notes = []
    t = 0.0
    for name, duration in names_and_durations:
        pitch = 60 + PITCH_NAMES.index(name)
        notes.append(Note(pitch=pitch, time=t, duration=duration))
        t += max(duration, 0.25)
    return notes


def track_of(pitches, **kwargs) -> Track:
    notes = [Note(pitch=p, time=i * 0.5, duration=0.5) for i, p in enumerate(pitches)]
    return Track(notes=notes, **kwargs)


ALL_KEYS = {f"{root} {mode}" for root in PITCH_NAMES for mode in ("Major", "Minor")}


class TestMelodyScore:
    """Tests for the melody likelihood score."""

    def test_in_band_track(self):
        track = track_of([60, 62, 64, 65, 67])
        expected = np.log(6) * 20 + 30 + np.log(6) * 10
        assert MelodySelector().score(track) == pytest.approx(expected)

    def test_repeated_pitch(self):
        track = track_of([72] * 10)
        expected = np.log(11) * 20 + 30 + np.log(2) * 10
        assert MelodySelector().score(track) == pytest.approx(expected)

    def test_below_band_penalized(self):
        track = track_of([40, 43, 45, 40, 43])
        expected = np.log(6) * 20 - 20 + np.log(4) * 10
        assert MelodySelector().score(track) == pytest.approx(expected)

    def test_above_band_penalized(self):
        track = track_of([90, 91, 92, 93, 94])
        expected = np.log(6) * 20 - 10 + np.log(6) * 10
        assert MelodySelector().score(track) == pytest.approx(expected)

    def test_band_edges_inclusive(self):
        selector = MelodySelector()
        low = track_of([60] * 5)
        high = track_of([84] * 5)
        assert selector.score(low) == pytest.approx(selector.score(high))
        assert selector.score(low) == pytest.approx(np.log(6) * 20 + 30 + np.log(2) * 10)

    def test_scores_monotonic_in_note_count(self):
        selector = MelodySelector()
        assert selector.score(track_of([64] * 20)) > selector.score(track_of([64] * 10))


class TestMelodySelection:
    """Tests for picking the melody track."""

    def test_lead_beats_bass(self):
        bass = track_of([36, 38, 40, 41, 43] * 4, id=0, name="bass")
        lead = track_of([67, 69, 71, 72, 74, 76], id=1, name="lead")

        melody = MelodySelector().select([bass, lead])

        assert melody is lead
        assert lead.role is TrackRole.MELODY
        assert bass.role is TrackRole.HARMONY

    def test_exactly_one_melody(self):
        tracks = [track_of([60 + i] * 8, id=i) for i in range(4)]
        MelodySelector().select(tracks)
        assert sum(t.role is TrackRole.MELODY for t in tracks) == 1

    def test_tie_goes_to_earliest(self):
        first = track_of([60, 62, 64, 65, 67], id=3)
        second = track_of([60, 62, 64, 65, 67], id=7)
        assert MelodySelector().select([first, second]) is first

    def test_tie_with_shared_ids(self):
        first = track_of([60, 62, 64, 65, 67])
        second = track_of([60, 62, 64, 65, 67])

        MelodySelector().select([first, second])

        assert first.role is TrackRole.MELODY
        assert second.role is TrackRole.HARMONY

    def test_empty(self):
        assert MelodySelector().select([]) is None

    def test_custom_band(self):
        selector = MelodySelector(melody_band=(30, 50))
        bass = track_of([36, 38, 40, 41, 43], id=0)
        lead = track_of([67, 69, 71, 72, 74], id=1)
        assert selector.select([lead, bass]) is bass


class TestTrackRoles:
    """Tests for manual role reassignment."""

    def test_promote_demotes_previous_melody(self):
        a = track_of([60] * 5, id=0, role=TrackRole.MELODY)
        b = track_of([62] * 5, id=1)

        set_track_role([a, b], 1, TrackRole.MELODY)

        assert b.role is TrackRole.MELODY
        assert a.role is TrackRole.HARMONY

    def test_non_melody_role_leaves_others(self):
        a = track_of([60] * 5, id=0, role=TrackRole.MELODY)
        b = track_of([62] * 5, id=1)

        set_track_role([a, b], 1, TrackRole.RHYTHM)

        assert a.role is TrackRole.MELODY
        assert b.role is TrackRole.RHYTHM

    def test_unknown_id(self):
        with pytest.raises(KeyError):
            set_track_role([track_of([60] * 5, id=0)], 42, TrackRole.MELODY)

    def test_find_melody_track(self):
        a = track_of([60] * 5, id=0)
        b = track_of([62] * 5, id=1, role=TrackRole.MELODY)
        assert find_melody_track([a, b]) is b

    def test_find_melody_falls_back_to_first_eligible(self):
        drums = track_of([36] * 5, id=0, role=TrackRole.RHYTHM)
        pad = track_of([60] * 5, id=1, role=TrackRole.HARMONY)
        assert find_melody_track([drums, pad]) is pad

    def test_find_melody_none(self):
        drums = track_of([36] * 5, role=TrackRole.RHYTHM)
        noise = track_of([60] * 2, role=TrackRole.IGNORE)
        assert find_melody_track([drums, noise]) is None
        assert find_melody_track([]) is None


class TestKeyDetection:
    """Tests for KeyDetector."""

    def test_no_notes_is_unknown(self):
        assert KeyDetector().detect([]) == UNKNOWN_KEY

    def test_unnamed_notes_are_skipped(self):
        notes = [Note(pitch=60, time=0, duration=1, name="??")]
        assert KeyDetector().detect(notes) == UNKNOWN_KEY

    def test_key_signature_wins(self):
        notes = notes_from([("C", 4), ("E", 1), ("G", 2)])
        assert KeyDetector().detect(notes, KeySignature("Bb", "major")) == "Bb Major"
        assert KeyDetector().detect([], KeySignature("D", "minor")) == "D Minor"

    def test_c_major(self):
        notes = notes_from([
            ("C", 4), ("D", 1), ("E", 1), ("F", 1), ("G", 2), ("A", 1), ("B", 1),
        ])
        assert KeyDetector().detect(notes) == "C Major"

    def test_a_minor(self):
        notes = notes_from([
            ("A", 4), ("B", 1), ("C", 1), ("D", 1), ("E", 2), ("F", 1), ("G", 1),
        ])
        assert KeyDetector().detect(notes) == "A Minor"

    def test_uniform_distribution_tie_break(self):
        # Every rotation scores the profile sum; minor's is larger and C is tried first
        notes = notes_from([(name, 1) for name in PITCH_NAMES])
        assert KeyDetector().detect(notes) == "C Minor"

    def test_non_positive_duration_counts_once(self):
        notes = [Note(pitch=62, time=0, duration=0)]
        info = KeyDetector().analyze(notes)
        assert info.name == "D Major"
        assert info.pitch_class_distribution[2] == pytest.approx(1.0)

    def test_distribution_sums_to_one(self):
        notes = notes_from([("C", 3), ("E", 0.5), ("G", 2), ("A#", 1)])
        info = KeyDetector().analyze(notes)
        assert info.pitch_class_distribution.sum() == pytest.approx(1.0)
        assert info.pitch_class_distribution[0] == pytest.approx(3 / 6.5)

    def test_flat_names_count_as_sharps(self):
        notes = [Note(pitch=70, time=0, duration=1, name="Bb4")]
        info = KeyDetector().analyze(notes)
        assert info.pitch_class_distribution[10] == pytest.approx(1.0)

    def test_alternatives_and_related_keys(self):
        notes = notes_from([
            ("C", 4), ("D", 1), ("E", 1), ("F", 1), ("G", 2), ("A", 1), ("B", 1),
        ])
        info = KeyDetector().analyze(notes)
        assert len(info.alternatives) == 3
        assert all(alt.correlation <= info.correlation for alt in info.alternatives)
        assert info.relative_key == "A Minor"
        assert info.parallel_key == "C Minor"
        assert not info.from_metadata

    @pytest.mark.parametrize("profile_type", ["krumhansl", "temperley"])
    @pytest.mark.parametrize("method", ["dot", "pearson"])
    def test_variants_return_valid_key(self, profile_type, method):
        notes = notes_from([("E", 2), ("F#", 1), ("G#", 1), ("B", 2), ("C#", 1)])
        detector = KeyDetector(profile_type=profile_type, method=method)
        assert detector.detect(notes) in ALL_KEYS

    def test_pearson_single_pitch_class(self):
        notes = [Note(pitch=60, time=0, duration=1)]
        assert KeyDetector(method="pearson").detect(notes) in ALL_KEYS

    def test_unknown_method(self):
        with pytest.raises(ValueError):
            KeyDetector(method="cosine")
