"""Pitch name utilities.

Note names come from an upstream parser as strings such as ``"F#3"`` or
``"Bb4"``. Every helper here normalizes to the sharp spelling used in
``PITCH_NAMES`` before comparing, so ``"Bb"`` and ``"A#"`` are the same
pitch class.

Malformed names are passed through unchanged instead of raising.
"""

import re
from typing import Optional

from .constants import PITCH_NAMES, ENHARMONIC_SPELLINGS

_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)?$")

_LETTER_OFFSETS = {"C": 0, "D": 2, "E": 4, "F": 5, "G": 7, "A": 9, "B": 11}


def _parse(note: str):
    """Split a note name into (letter, accidental, octave or None)."""
    if not isinstance(note, str):
        return None
    match = _NOTE_RE.match(note.strip())
    if not match:
        return None
    letter, accidental, octave = match.groups()
    return letter.upper(), accidental, int(octave) if octave is not None else None


def pitch_class(note: str) -> str:
    """
    Get the canonical pitch class of a note name.

    Args:
        note: Note name with or without octave (e.g. "Bb3", "F#")

    Returns:
        One of PITCH_NAMES, or the input unchanged if it cannot be parsed
    """
    parsed = _parse(note)
    if parsed is None:
        return note
    letter, accidental, _ = parsed
    name = letter + accidental
    return ENHARMONIC_SPELLINGS.get(name, name)


def pitch_class_index(note: str) -> int:
    """Index of a note's pitch class in PITCH_NAMES (0=C), -1 if malformed."""
    pc = pitch_class(note)
    if pc in PITCH_NAMES:
        return PITCH_NAMES.index(pc)
    return -1


def transpose(pc: str, semitones: int) -> str:
    """
    Transpose a pitch class, wrapping modulo 12.

    Args:
        pc: Pitch class (octave, if present, is ignored)
        semitones: Shift in semitones (may be negative)

    Returns:
        Transposed pitch class, or the input unchanged if malformed
    """
    index = pitch_class_index(pc)
    if index == -1:
        return pc
    return PITCH_NAMES[(index + semitones) % 12]


def note_to_midi(note: str) -> Optional[int]:
    """Convert a note name with octave to a MIDI number (C4 = 60)."""
    parsed = _parse(note)
    if parsed is None or parsed[2] is None:
        return None
    letter, accidental, octave = parsed
    offset = _LETTER_OFFSETS[letter]
    if accidental == "#":
        offset += 1
    elif accidental == "b":
        offset -= 1
    return (octave + 1) * 12 + offset


def midi_to_note(pitch: int) -> str:
    """Convert a MIDI number to a sharp-spelled note name (60 -> "C4")."""
    octave = (pitch // 12) - 1
    return f"{PITCH_NAMES[pitch % 12]}{octave}"


def transpose_with_octave(note: str, semitones: int) -> str:
    """
    Transpose a full note name, rolling the octave over at C.

    "B3" + 1 -> "C4", "C4" - 1 -> "B3".

    Returns:
        Transposed note name, or the input unchanged if malformed
    """
    midi = note_to_midi(note)
    if midi is None:
        return note
    return midi_to_note(midi + semitones)


def pitch_sort_key(note: str):
    """Sort key ordering note names by absolute pitch (malformed names first)."""
    midi = note_to_midi(note)
    return (midi if midi is not None else -1, note)
