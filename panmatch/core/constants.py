"""Global constants for panmatch."""

# Pitch names (sharp spelling is canonical)
PITCH_NAMES = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

# Enharmonic spellings folded onto PITCH_NAMES
ENHARMONIC_SPELLINGS = {
    "Db": "C#",
    "Eb": "D#",
    "Gb": "F#",
    "Ab": "G#",
    "Bb": "A#",
    "E#": "F",
    "B#": "C",
    "Fb": "E",
    "Cb": "B",
}

# Musical defaults
DEFAULT_TEMPO = 120.0
DEFAULT_VELOCITY = 64
DEFAULT_QUANTIZE_DIVISION = 4  # 16th notes (4 per quarter)

# MIDI
DRUM_CHANNEL = 9  # MIDI channel 10

# Track triage
MIN_TRACK_NOTES = 5
MELODY_BAND = (60, 84)  # C4 - C6

# Transposition search
MAX_TRANSPOSITION = 6
