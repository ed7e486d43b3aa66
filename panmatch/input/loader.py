"""Song loading - Turn MIDI files or JSON documents into Song objects."""

import json
from pathlib import Path
from typing import Any, Dict, List, Optional

import pretty_midi

from ..core import Note, Track, KeySignature, Song, PITCH_NAMES, DRUM_CHANNEL
from ..core.pitch import note_to_midi


class SongLoader:
    """Handles song loading from MIDI files and JSON documents.

    MIDI decoding is delegated to pretty_midi. pretty_midi does not keep
    channel numbers, so drum instruments get the drum channel and every
    other instrument channel 0.
    """

    MIDI_FORMATS = {".mid", ".midi"}
    JSON_FORMATS = {".json"}
    SUPPORTED_FORMATS = MIDI_FORMATS | JSON_FORMATS

    def __init__(self, default_tempo: Optional[float] = None):
        """
        Initialize SongLoader.

        Args:
            default_tempo: Tempo to assume when the file declares none
        """
        self.default_tempo = default_tempo

    def load(self, path: str) -> Song:
        """
        Load a song.

        Args:
            path: Path to a .mid/.midi or .json file

        Returns:
            Parsed Song

        Raises:
            ValueError: If file format not supported or the document is invalid
            FileNotFoundError: If file doesn't exist
        """
        path = Path(path)

        if not path.exists():
            raise FileNotFoundError(f"Song file not found: {path}")

        suffix = path.suffix.lower()
        if suffix not in self.SUPPORTED_FORMATS:
            raise ValueError(
                f"Unsupported format: {path.suffix}. "
                f"Supported: {sorted(self.SUPPORTED_FORMATS)}"
            )

        if suffix in self.JSON_FORMATS:
            try:
                data = json.loads(path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as e:
                raise ValueError(f"Invalid song JSON in {path}: {e}") from e
            if not isinstance(data, dict):
                raise ValueError(f"Song JSON must be an object: {path}")
            data.setdefault("name", path.stem)
            return self.from_dict(data)

        midi = pretty_midi.PrettyMIDI(str(path))
        return self.from_pretty_midi(midi, name=path.stem)

    def from_pretty_midi(self, midi: pretty_midi.PrettyMIDI, name: str = "") -> Song:
        """Convert a PrettyMIDI object into a Song."""
        _, tempi = midi.get_tempo_changes()
        bpm = float(tempi[0]) if len(tempi) else self.default_tempo

        key_signature = None
        if midi.key_signature_changes:
            key_number = midi.key_signature_changes[0].key_number
            key_signature = KeySignature(
                root=PITCH_NAMES[key_number % 12],
                mode="major" if key_number < 12 else "minor",
            )

        tracks = []
        for index, instrument in enumerate(midi.instruments):
            notes = [
                Note(
                    pitch=n.pitch,
                    time=float(n.start),
                    duration=float(n.end - n.start),
                    ticks=midi.time_to_tick(n.start),
                    duration_ticks=midi.time_to_tick(n.end) - midi.time_to_tick(n.start),
                    velocity=n.velocity,
                    name=pretty_midi.note_number_to_name(n.pitch),
                )
                for n in sorted(instrument.notes, key=lambda n: (n.start, n.pitch))
            ]
            if not notes:
                continue

            if instrument.is_drum:
                family = "drums"
            else:
                family = pretty_midi.program_to_instrument_class(instrument.program).lower()

            tracks.append(Track(
                notes=notes,
                name=instrument.name or f"Track {index + 1}",
                instrument_family=family,
                channel=DRUM_CHANNEL if instrument.is_drum else 0,
                is_percussion=instrument.is_drum,
                id=index,
            ))

        return Song(
            tracks=tracks,
            name=name,
            bpm=bpm,
            ppq=midi.resolution,
            duration=float(midi.get_end_time()),
            key_signature=key_signature,
        )

    def from_dict(self, data: Dict[str, Any]) -> Song:
        """
        Build a Song from a plain dictionary (the JSON document shape).

        Raises:
            ValueError: If a note has neither a valid pitch nor a valid name
        """
        key_signature = None
        if data.get("key_signature"):
            ks = data["key_signature"]
            key_signature = KeySignature(root=ks["root"], mode=ks.get("mode", "major"))

        tracks = [
            self._track_from_dict(t, index)
            for index, t in enumerate(data.get("tracks", []))
        ]

        return Song(
            tracks=tracks,
            name=data.get("name", ""),
            bpm=data.get("bpm", self.default_tempo),
            ppq=data.get("ppq"),
            duration=float(data.get("duration", 0.0)),
            key_signature=key_signature,
        )

    def _track_from_dict(self, data: Dict[str, Any], index: int) -> Track:
        notes: List[Note] = []
        for n in data.get("notes", []):
            pitch = n.get("pitch")
            if pitch is None:
                pitch = note_to_midi(n.get("name", ""))
            if pitch is None:
                raise ValueError(f"Note without pitch in track {index}: {n}")
            notes.append(Note(
                pitch=int(pitch),
                time=float(n.get("time", 0.0)),
                duration=float(n.get("duration", 0.0)),
                ticks=n.get("ticks"),
                duration_ticks=n.get("duration_ticks"),
                velocity=int(n.get("velocity", 64)),
                name=n.get("name"),
            ))

        return Track(
            notes=notes,
            name=data.get("name") or f"Track {index + 1}",
            instrument_family=data.get("instrument_family", ""),
            channel=int(data.get("channel", 0)),
            is_percussion=bool(data.get("is_percussion", False)),
            id=int(data.get("id", index)),
        )
