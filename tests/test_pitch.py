"""Tests for note/track types and pitch name utilities."""

import pytest
from pathlib import Path

# Add project root to path for imports
import sys
sys.path.insert(0, str(Path(__file__).parent.parent))

from panmatch.core import (
    Note,
    Track,
    KeySignature,
    PITCH_NAMES,
    pitch_class,
    transpose,
    transpose_with_octave,
    note_to_midi,
    midi_to_note,
    pitch_sort_key,
)


class TestNote:
    """Tests for Note dataclass."""

    def test_note_creation(self):
        note = Note(pitch=60, time=0.0, duration=1.0, velocity=80)
        assert note.pitch == 60
        assert note.time == 0.0
        assert note.duration == 1.0
        assert note.velocity == 80

    def test_note_end(self):
        note = Note(pitch=60, time=0.5, duration=1.0)
        assert note.end == 1.5

    def test_name_derived_from_pitch(self):
        assert Note(pitch=60, time=0, duration=1).name == "C4"
        assert Note(pitch=69, time=0, duration=1).name == "A4"
        assert Note(pitch=61, time=0, duration=1).name == "C#4"

    def test_parser_name_kept(self):
        note = Note(pitch=70, time=0, duration=1, name="Bb4")
        assert note.name == "Bb4"
        assert note.pitch_class == 10


class TestTrack:
    """Tests for Track helpers."""

    def test_unique_pitch_classes_normalize_flats(self):
        notes = [
            Note(pitch=58, time=0, duration=1, name="Bb3"),
            Note(pitch=70, time=1, duration=1, name="A#4"),
            Note(pitch=60, time=2, duration=1, name="C4"),
            Note(pitch=58, time=3, duration=1, name="Bb3"),
        ]
        track = Track(notes=notes)

        assert track.full_note_names() == ["Bb3", "A#4", "C4"]
        assert track.pitch_classes() == ["A#", "C"]

    def test_statistics(self):
        track = Track(notes=[Note(pitch=p, time=0, duration=1) for p in (60, 64, 64, 68)])
        assert track.note_count == 4
        assert track.unique_pitch_count == 3
        assert track.mean_pitch == 64.0

    def test_empty_track(self):
        track = Track(notes=[])
        assert track.note_count == 0
        assert track.mean_pitch == 0.0
        assert track.pitch_classes() == []


class TestKeySignature:

    def test_format(self):
        assert str(KeySignature("D", "minor")) == "D Minor"
        assert str(KeySignature("Bb", "major")) == "Bb Major"


class TestPitchClass:
    """Tests for pitch class extraction."""

    def test_strips_octave(self):
        assert pitch_class("F#3") == "F#"
        assert pitch_class("C4") == "C"
        assert pitch_class("A") == "A"

    def test_flats_become_sharps(self):
        assert pitch_class("Bb3") == "A#"
        assert pitch_class("Eb") == "D#"
        assert pitch_class("Db4") == "C#"

    def test_rare_enharmonics(self):
        assert pitch_class("Cb4") == "B"
        assert pitch_class("E#2") == "F"

    def test_always_canonical(self):
        for name in ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]:
            assert pitch_class(name + "4") in PITCH_NAMES

    def test_malformed_is_identity(self):
        assert pitch_class("H2") == "H2"
        assert pitch_class("") == ""
        assert pitch_class("not a note") == "not a note"


class TestTranspose:
    """Tests for pitch class transposition."""

    def test_wraps_upward(self):
        assert transpose("A", 3) == "C"
        assert transpose("B", 1) == "C"

    def test_wraps_downward(self):
        assert transpose("C", -1) == "B"
        assert transpose("C", -13) == "B"

    def test_accepts_flats(self):
        assert transpose("Bb", 2) == "C"

    def test_ignores_octave(self):
        assert transpose("E4", 2) == "F#"

    def test_round_trip(self):
        for name in PITCH_NAMES:
            for t in range(-6, 7):
                assert transpose(transpose(name, t), -t) == name

    def test_malformed_is_identity(self):
        assert transpose("X", 5) == "X"


class TestTransposeWithOctave:
    """Tests for octave-aware transposition."""

    def test_octave_rolls_over_at_c(self):
        assert transpose_with_octave("B3", 1) == "C4"
        assert transpose_with_octave("C4", -1) == "B3"

    def test_same_octave(self):
        assert transpose_with_octave("F#3", 0) == "F#3"
        assert transpose_with_octave("D4", 2) == "E4"

    def test_full_octave(self):
        assert transpose_with_octave("A4", 12) == "A5"
        assert transpose_with_octave("A4", -12) == "A3"

    def test_flat_input_gives_sharp_output(self):
        assert transpose_with_octave("Bb3", 2) == "C4"
        assert transpose_with_octave("Eb4", 0) == "D#4"

    def test_malformed_is_identity(self):
        assert transpose_with_octave("foo", 3) == "foo"
        assert transpose_with_octave("F#", 3) == "F#"


class TestPitchOrdering:
    """Tests for numeric pitch conversion."""

    def test_note_to_midi(self):
        assert note_to_midi("C4") == 60
        assert note_to_midi("A4") == 69
        assert note_to_midi("C#-1") == 1
        assert note_to_midi("B#3") == 60

    def test_note_to_midi_needs_octave(self):
        assert note_to_midi("F#") is None
        assert note_to_midi("garbage") is None

    def test_midi_to_note(self):
        assert midi_to_note(60) == "C4"
        assert midi_to_note(66) == "F#4"

    @pytest.mark.parametrize("name", ["C2", "F#3", "A4", "D#5", "B6"])
    def test_name_round_trip(self, name):
        assert midi_to_note(note_to_midi(name)) == name

    def test_sort_by_pitch(self):
        notes = ["C5", "A3", "F#4", "Bb3"]
        assert sorted(notes, key=pitch_sort_key) == ["A3", "Bb3", "F#4", "C5"]
