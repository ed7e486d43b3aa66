"""panmatch - MIDI melody triage and handpan scale matching.

Architecture Layers:
    1. core/       - Note/track types, pitch utilities, configuration
    2. input/      - Song loading (MIDI via pretty_midi, JSON)
    3. processing/ - Track filtering and melody quantization
    4. inference/  - Musical understanding (melody track, key)
    5. matching/   - Scale catalog, transposition search, tiered selection
    6. pipeline    - Two-stage orchestration (process, match)
    7. exporter    - JSON reports
"""

__version__ = "0.1.0"

# Core types
from .core import Note, Track, TrackRole, KeySignature, Song, AnalysisConfig

# Input layer
from .input import SongLoader

# Processing layer
from .processing import TrackFilter, Quantizer

# Inference layer
from .inference import KeyDetector, MelodySelector, set_track_role

# Matching layer
from .matching import (
    ScaleDefinition,
    SCALES,
    ScaleMatcher,
    MatchCandidate,
    TieredSelector,
    MatchResult,
    MatchMode,
)

# Pipeline
from .pipeline import SongAnalyzer, ProcessedSong

# Output
from .exporter import ReportExporter

__all__ = [
    # Core
    "Note",
    "Track",
    "TrackRole",
    "KeySignature",
    "Song",
    "AnalysisConfig",
    # Input
    "SongLoader",
    # Processing
    "TrackFilter",
    "Quantizer",
    # Inference
    "KeyDetector",
    "MelodySelector",
    "set_track_role",
    # Matching
    "ScaleDefinition",
    "SCALES",
    "ScaleMatcher",
    "MatchCandidate",
    "TieredSelector",
    "MatchResult",
    "MatchMode",
    # Pipeline
    "SongAnalyzer",
    "ProcessedSong",
    # Output
    "ReportExporter",
]
