"""Handpan scale catalog - Static reference data for scale matching.

Each scale is a central root note (the "ding") plus top and bottom tone
fields. The pitch-class set and note count are computed once when the
catalog is built and never change afterwards.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, FrozenSet, Iterable, List, Optional, Sequence, Tuple

from ..core.pitch import pitch_class, pitch_sort_key


@dataclass(frozen=True)
class ScaleDefinition:
    """A handpan scale.

    Attributes:
        id: Stable identifier (e.g. "d_kurd_9")
        name: Display name
        ding: Root note with octave
        top: Top tone fields
        bottom: Bottom tone fields
        popularity: 0.0 (rare) - 1.0 (popular)
        mood: -1.0 (dark) - 1.0 (bright)
        texture: 0.0 (pure) - 1.0 (spicy)
        tags: Descriptive tags
    """

    id: str
    name: str
    ding: str
    top: Tuple[str, ...]
    bottom: Tuple[str, ...] = ()
    popularity: float = 0.0
    mood: float = 0.0
    texture: float = 0.0
    tags: Tuple[str, ...] = ()
    pitch_classes: FrozenSet[str] = field(init=False, repr=False, compare=False)
    note_count: int = field(init=False, compare=False)

    def __post_init__(self):
        notes = (self.ding,) + tuple(self.top) + tuple(self.bottom)
        object.__setattr__(self, "pitch_classes", frozenset(pitch_class(n) for n in notes))
        object.__setattr__(self, "note_count", 1 + len(self.top) + len(self.bottom))

    @property
    def root(self) -> str:
        """Pitch class of the ding."""
        return pitch_class(self.ding)

    def sorted_notes(self) -> List[str]:
        """All distinct notes ordered from lowest to highest."""
        notes = dict.fromkeys((self.ding,) + tuple(self.top) + tuple(self.bottom))
        return sorted(notes, key=pitch_sort_key)

    def sorted_pitch_classes(self) -> Tuple[str, ...]:
        """Pitch classes ordered by first appearance from the lowest note up."""
        return tuple(dict.fromkeys(pitch_class(n) for n in self.sorted_notes()))


def _scale(
    id: str,
    name: str,
    ding: str,
    top: Sequence[str],
    bottom: Sequence[str] = (),
    mood: float = 0.0,
    texture: float = 0.0,
    popularity: float = 0.0,
    tags: Sequence[str] = (),
) -> ScaleDefinition:
    return ScaleDefinition(
        id=id,
        name=name,
        ding=ding,
        top=tuple(top),
        bottom=tuple(bottom),
        popularity=popularity,
        mood=mood,
        texture=texture,
        tags=tuple(tags),
    )


SCALES: Tuple[ScaleDefinition, ...] = (
    _scale(
        "d_kurd_9",
        "D Kurd 9",
        ding="D3",
        top=("A3", "Bb3", "C4", "D4", "E4", "F4", "G4", "A4"),
        bottom=(),
        mood=-0.8,
        texture=0.1,
        popularity=1.0,
        tags=("Minor", "Popular", "Steady Seller", "Emotional"),
    ),
    _scale(
        "d_kurd_10",
        "D Kurd 10",
        ding="D3",
        top=("A3", "Bb3", "C4", "D4", "E4", "F4", "G4", "A4", "C5"),
        bottom=(),
        mood=-0.8,
        texture=0.1,
        popularity=0.98,
        tags=("Minor", "Popular", "Most Practice Songs", "Youtube Tutorials"),
    ),
    _scale(
        "e_equinox_14",
        "E Equinox 14",
        ding="E3",
        top=("G3", "B3", "C4", "D4", "E4", "F#4", "G4", "B4", "C5"),
        bottom=("C3", "D3", "D5", "E5"),
        mood=-0.4,
        texture=0.4,
        popularity=0.5,
        tags=("Major+Minor", "Hybrid", "Advanced", "Bittersweet"),
    ),
    _scale(
        "fs_low_pygmy_14_mutant",
        "F# Low Pygmy 14",
        ding="F#3",
        top=("G#3", "A3", "C#4", "E4", "F#4", "G#4", "A4", "B4", "C#5", "D3", "E3"),
        bottom=("E5", "F#5"),
        mood=-0.6,
        texture=0.25,
        popularity=0.95,
        tags=("Pygmy", "Malte Marten Style", "Wellness Emotion", "Youtube Trend"),
    ),
    _scale(
        "f_aeolian_10",
        "F Aeolian 10",
        ding="F3",
        top=("Ab3", "Bb3", "C4", "Db4", "Eb4", "F4", "G4", "Ab4", "C5"),
        bottom=(),
        mood=-0.8,
        texture=0.15,
        popularity=0.7,
        tags=("Minor", "Bottom Upgrade Best", "Korean emotion"),
    ),
    _scale(
        "e_romanian_hijaz_10",
        "E Romanian Hijaz 10",
        ding="E3",
        top=("A3", "B3", "C4", "D#4", "E4", "F#4", "G4", "A4", "B4"),
        bottom=(),
        mood=-0.5,
        texture=0.75,
        popularity=0.35,
        tags=("Exotic", "Gypsy", "Unique", "Bohemian"),
    ),
    _scale(
        "d_saladin_9",
        "D Saladin 9",
        ding="D3",
        top=("G3", "A3", "C4", "D4", "Eb4", "F#4", "G4", "A4"),
        bottom=(),
        mood=-0.2,
        texture=0.85,
        popularity=0.1,
        tags=("Arabian", "Rare", "Spicy", "Phrygian"),
    ),
    _scale(
        "d_asha_9",
        "D Asha 9",
        ding="D3",
        top=("G3", "A3", "B3", "C#4", "D4", "E4", "F#4", "A4"),
        bottom=(),
        mood=0.9,
        texture=0.1,
        popularity=0.9,
        tags=("D Major", "Popular Second Pan", "Gentle Soft", "Sabye", "Ashakiran"),
    ),
    _scale(
        "e_la_sirena_10",
        "E La Sirena 10",
        ding="E3",
        top=("G3", "B3", "C#4", "D4", "E4", "F#4", "G4", "B4", "E5"),
        bottom=(),
        mood=-0.3,
        texture=0.6,
        popularity=0.4,
        tags=("Dorian", "Intermediate", "Siren", "C#4 Point"),
    ),
    _scale(
        "cs_pygmy_9",
        "C# Pygmy 9",
        ding="C#3",
        top=("F#3", "G#3", "A3", "C#4", "E4", "F#4", "G#4", "A4"),
        bottom=(),
        mood=-0.7,
        texture=0.05,
        popularity=0.85,
        tags=("Pygmy", "Trance", "Deep", "Classic"),
    ),
    _scale(
        "d_asha_15_mutant",
        "D Asha 15",
        ding="D3",
        top=("A3", "B3", "C#4", "D4", "E4", "F#4", "G4", "A4", "B4", "C#5", "D5"),
        bottom=("E3", "F#3", "G3"),
        mood=0.9,
        texture=0.1,
        popularity=0.8,
        tags=("D Major", "2 Octaves", "Versatile", "Great for Jamming"),
    ),
    _scale(
        "e_equinox_12",
        "E Equinox 12",
        ding="E3",
        top=("G3", "B3", "C4", "D4", "E4", "F#4", "G4", "B4", "C5"),
        bottom=("D3", "C3"),
        mood=-0.3,
        texture=0.3,
        popularity=0.6,
        tags=("Equinox", "Major+Minor", "Bass Boost", "Subtle Feeling", "Intermediate"),
    ),
    _scale(
        "e_equinox_10",
        "E Equinox 10",
        ding="E3",
        top=("G3", "B3", "C4", "D4", "E4", "F#4", "G4", "B4", "C5"),
        bottom=(),
        mood=-0.3,
        texture=0.3,
        popularity=0.7,
        tags=("Equinox", "Major+Minor", "Somewhere In Between", "Subtle Feeling", "Unique Emotion"),
    ),
    _scale(
        "fs_low_pygmy_18_mutant",
        "F# Low Pygmy 18",
        ding="F#3",
        top=("G#3", "A3", "D4", "E4", "F#4", "G#4", "A4", "D5", "E5", "F#5", "G#5"),
        bottom=("D3", "E3", "B3", "C#4", "B4", "C#5"),
        mood=-0.6,
        texture=0.25,
        popularity=0.9,
        tags=("Malte Marten Style", "Mutant", "High Range", "Pygmy", "Professional"),
    ),
    _scale(
        "cs_pygmy_11",
        "C# Pygmy 11",
        ding="C#3",
        top=("F#3", "G#3", "A3", "C#4", "E4", "F#4", "G#4", "A4"),
        bottom=("D3", "E3"),
        mood=-0.7,
        texture=0.05,
        popularity=0.8,
        tags=("Pygmy", "Bass Boost", "Trance", "Deep Resonance"),
    ),
    _scale(
        "f_low_pygmy_12",
        "F Low Pygmy 12",
        ding="F3",
        top=("G3", "Ab3", "C4", "Eb4", "F4", "G4", "Ab4", "C5", "Eb5"),
        bottom=("Eb3", "Db3"),
        mood=-0.6,
        texture=0.1,
        popularity=0.75,
        tags=("Pygmy", "Bass Boost", "Wellness Emotion", "Dreamy"),
    ),
    _scale(
        "d_kurd_12",
        "D Kurd 12",
        ding="D3",
        top=("A3", "Bb3", "C4", "D4", "E4", "F4", "G4", "A4", "C5"),
        bottom=("F3", "G3"),
        mood=-0.8,
        texture=0.1,
        popularity=0.95,
        tags=("Popular", "Minor", "Bass Boost", "Harmonic Play Boost", "Modern Emotion"),
    ),
    _scale(
        "f_low_pygmy_9",
        "F Low Pygmy 9",
        ding="F3",
        top=("G3", "G#3", "C4", "D#4", "F4", "G4", "G#4", "C5"),
        bottom=(),
        mood=-0.6,
        texture=0.1,
        popularity=0.7,
        tags=("Pygmy", "Basic", "Calm", "Meditation"),
    ),
    _scale(
        "cs_annapurna_9",
        "C# Annapurna 9",
        ding="C#3",
        top=("G#3", "C4", "C#4", "D#4", "F4", "F#4", "G#4", "C#5"),
        bottom=(),
        mood=0.8,
        texture=0.35,
        popularity=0.5,
        tags=("Major", "Annapurna", "Refreshing", "Cooling"),
    ),
    _scale(
        "c_major_10",
        "C Major 10",
        ding="C3",
        top=("G3", "A3", "B3", "C4", "D4", "E4", "F4", "G4", "A4"),
        bottom=(),
        mood=1.0,
        texture=0.0,
        popularity=0.6,
        tags=("Major", "Easy Scale", "Bright", "Nursery Rhymes"),
    ),
    _scale(
        "c_rasavali_10",
        "C Rasavali 10",
        ding="C3",
        top=("G3", "Ab3", "C4", "D4", "E4", "F4", "G4", "Ab4", "C5"),
        bottom=(),
        mood=-0.2,
        texture=0.6,
        popularity=0.3,
        tags=("Rasavali", "Indian Style", "Exotic Emotion", "Unique"),
    ),
    _scale(
        "cs_deepasia_14",
        "C# Deepasia 14",
        ding="C#3",
        top=("G#3", "Bb3", "C#4", "F4", "F#4", "G#4", "C#5", "D#5", "F5"),
        bottom=("D#3", "F3"),
        mood=-0.5,
        texture=0.5,
        popularity=0.4,
        tags=("Extended Major", "Asian Feeling", "Refreshing"),
    ),
    _scale(
        "cs_blues_9",
        "C# Blues 9",
        ding="C#3",
        top=("G#3", "B3", "C#4", "E4", "F#4", "G4", "G#4", "B4"),
        bottom=(),
        mood=-0.1,
        texture=0.6,
        popularity=0.4,
        tags=("Blues Emotion", "Jazz", "Tritone Use", "Intermediate"),
    ),
    _scale(
        "eb_muju_10",
        "Eb MUJU 10",
        ding="Eb3",
        top=("G3", "Ab3", "Bb3", "C4", "Eb4", "F4", "G4", "Ab4", "C5"),
        bottom=(),
        mood=0.5,
        texture=0.2,
        popularity=0.3,
        tags=("Eb Major", "Korean Traditional", "Arirang Scale", "Muju Nature"),
    ),
    _scale(
        "c_yunsl_9",
        "C Yunsl 9",
        ding="C3",
        top=("C4", "D4", "E4", "F4", "G4", "B4", "C5", "D5"),
        bottom=(),
        mood=0.8,
        texture=0.1,
        popularity=0.5,
        tags=("Major", "Yunsl", "Sparkling", "Clear"),
    ),
    _scale(
        "cs_sapphire_9",
        "C# Sapphire 9",
        ding="C#3",
        top=("G#3", "B3", "C#4", "F4", "F#4", "G#4", "B4", "C#5"),
        bottom=(),
        mood=-0.2,
        texture=0.4,
        popularity=0.4,
        tags=("Sapphire", "Major 3rd/Minor 7th", "Mixolydian", "Uncommon"),
    ),
    _scale(
        "cs_annaziska_9",
        "C# Annaziska 9",
        ding="C#3",
        top=("G#3", "A3", "B3", "C#4", "D#4", "E4", "F#4", "G#4"),
        bottom=(),
        mood=-0.4,
        texture=0.5,
        popularity=0.2,
        tags=("Exotic", "Tension", "Mysterious", "Mania"),
    ),
    _scale(
        "e_hijaz_9",
        "E Hijaz 9",
        ding="E3",
        top=("A3", "B3", "C4", "D#4", "E4", "F#4", "G4", "B4"),
        bottom=(),
        mood=-0.3,
        texture=0.7,
        popularity=0.5,
        tags=("Exotic", "Middle Eastern", "Passionate", "Spicy"),
    ),
    _scale(
        "cs_amara_9",
        "C# Amara 9",
        ding="C#3",
        top=("G#3", "B3", "C#4", "D#4", "E4", "F#4", "G#4", "B4"),
        bottom=(),
        mood=-0.7,
        texture=0.2,
        popularity=0.9,
        tags=("Amara", "Celtic Minor", "Classic", "Beginners"),
    ),
    _scale(
        "fs_low_pygmy_12",
        "F# Low Pygmy 12",
        ding="F#3",
        top=("G#3", "A3", "C#4", "E4", "F#4", "G#4", "A4", "C#5", "E5"),
        bottom=("D3", "E3"),
        mood=-0.7,
        texture=0.2,
        popularity=0.7,
        tags=("Pygmy", "Bass Boost", "Dreamy", "Healing"),
    ),
    _scale(
        "e_amara_18",
        "E Amara 18",
        ding="E3",
        top=("B3", "C4", "E4", "F#4", "G4", "A4", "B4", "C5", "E5", "F#5", "G5", "A5"),
        bottom=("C3", "D3", "G3", "A3", "D5"),
        mood=-0.6,
        texture=0.8,
        popularity=0.5,
        tags=("Amara", "Celtic Minor", "Mutant", "Professional"),
    ),
    _scale(
        "cs_amara_10",
        "C# Amara 10",
        ding="C#3",
        top=("G#3", "B3", "C#4", "D#4", "E4", "F#4", "G#4", "B4", "C#5"),
        bottom=(),
        mood=-0.7,
        texture=0.15,
        popularity=0.95,
        tags=("Minor", "Popular", "Beginner Recommended", "Amara"),
    ),
)

DEFAULT_SCALE = SCALES[0]

_REQUIRED_FIELDS = ("id", "name", "ding", "top")


def get_scale(
    scale_id: str,
    catalog: Sequence[ScaleDefinition] = SCALES,
) -> ScaleDefinition:
    """
    Look up a scale by id.

    Raises:
        KeyError: If the id is not in the catalog
    """
    for scale in catalog:
        if scale.id == scale_id:
            return scale
    raise KeyError(f"Unknown scale id: {scale_id}")


def find_scale_by_name(
    name: str,
    catalog: Sequence[ScaleDefinition] = SCALES,
) -> Optional[ScaleDefinition]:
    """First scale with this display name, or None."""
    return next((s for s in catalog if s.name == name), None)


def catalog_from_dicts(entries: Iterable[Dict]) -> Tuple[ScaleDefinition, ...]:
    """
    Build a catalog from plain dictionaries.

    Raises:
        ValueError: If an entry is missing a required field
    """
    scales = []
    for i, entry in enumerate(entries):
        missing = [f for f in _REQUIRED_FIELDS if f not in entry]
        if missing:
            raise ValueError(f"Catalog entry {i} is missing fields: {missing}")
        scales.append(_scale(
            entry["id"],
            entry["name"],
            ding=entry["ding"],
            top=entry["top"],
            bottom=entry.get("bottom", ()),
            mood=float(entry.get("mood", 0.0)),
            texture=float(entry.get("texture", 0.0)),
            popularity=float(entry.get("popularity", 0.0)),
            tags=entry.get("tags", ()),
        ))
    if not scales:
        raise ValueError("Catalog is empty")
    return tuple(scales)


def load_catalog(path: str) -> Tuple[ScaleDefinition, ...]:
    """
    Load a custom catalog from a JSON list of scale entries.

    Raises:
        FileNotFoundError: If the file doesn't exist
        ValueError: If the file is not a valid catalog
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(f"Catalog file not found: {path}")

    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid catalog JSON in {path}: {e}") from e

    if not isinstance(data, list):
        raise ValueError(f"Catalog must be a JSON list of scales: {path}")

    return catalog_from_dicts(data)
