"""Key detection - Identify the tonal center of the melody.

Implements key detection with:
- Embedded key-signature metadata taking precedence over estimation
- Krumhansl-Schmuckler key profiles (Temperley profiles as an alternative)
- Duration-weighted pitch-class histogram
- Relative / parallel key lookup for display
"""

import numpy as np
from typing import List, Optional
from dataclasses import dataclass, field

from ..core import Note, KeySignature, PITCH_NAMES
from ..core.pitch import pitch_class_index

UNKNOWN_KEY = "Unknown"


@dataclass
class KeyCandidate:
    """A candidate key with its score."""
    root: str
    mode: str
    correlation: float

    @property
    def name(self) -> str:
        return f"{self.root} {self.mode.capitalize()}"


@dataclass
class KeyInfo:
    """Container for key detection results."""

    root: str  # Key root note (e.g., "C", "F#")
    mode: str  # "major" or "minor"
    correlation: float  # Score of the winning profile
    pitch_class_distribution: np.ndarray = None  # 12-element array, sums to 1
    alternatives: List[KeyCandidate] = field(default_factory=list)  # Next best keys
    relative_key: Optional[str] = None  # Relative major/minor
    parallel_key: Optional[str] = None  # Same root, other mode
    from_metadata: bool = False

    @property
    def name(self) -> str:
        if not self.root:
            return UNKNOWN_KEY
        return f"{self.root} {self.mode.capitalize()}"


class KeyDetector:
    """Detect musical key from the melody's notes.

    Each note contributes its duration (or 1 when the duration is not
    positive) to its pitch-class bin. The normalized histogram is scored at
    every rotation against a major and a minor profile. Rotation 0 is tried
    first and major before minor, so the first best pair wins ties.
    """

    # Krumhansl-Schmuckler key profiles (cognitive-based)
    KRUMHANSL_MAJOR = np.array(
        [6.35, 2.23, 3.48, 2.33, 4.38, 4.09, 2.52, 5.19, 2.39, 3.66, 2.29, 2.88]
    )
    KRUMHANSL_MINOR = np.array(
        [6.33, 2.68, 3.52, 5.38, 2.60, 3.53, 2.54, 4.75, 3.98, 2.69, 3.34, 3.17]
    )

    # Temperley key profiles (corpus-based)
    TEMPERLEY_MAJOR = np.array(
        [5.0, 2.0, 3.5, 2.0, 4.5, 4.0, 2.0, 4.5, 2.0, 3.5, 1.5, 4.0]
    )
    TEMPERLEY_MINOR = np.array(
        [5.0, 2.0, 3.5, 4.5, 2.0, 4.0, 2.0, 4.5, 3.5, 2.0, 1.5, 4.0]
    )

    METHODS = ("dot", "pearson")

    def __init__(
        self,
        profile_type: str = "krumhansl",
        method: str = "dot",
    ):
        """
        Initialize KeyDetector.

        Args:
            profile_type: Key profile set ("krumhansl" or "temperley")
            method: Profile scoring, "dot" (weighted sum) or "pearson"
        """
        if method not in self.METHODS:
            raise ValueError(f"Unknown key method: {method}. Supported: {self.METHODS}")

        self.profile_type = profile_type
        self.method = method

        if profile_type == "temperley":
            self.major_profile = self.TEMPERLEY_MAJOR
            self.minor_profile = self.TEMPERLEY_MINOR
        else:
            self.major_profile = self.KRUMHANSL_MAJOR
            self.minor_profile = self.KRUMHANSL_MINOR

    def detect(
        self,
        notes: List[Note],
        key_signature: Optional[KeySignature] = None,
    ) -> str:
        """
        Detect the key as a display string.

        Args:
            notes: Melody notes (after quantization)
            key_signature: Declared key; returned verbatim when present

        Returns:
            "<Root> Major", "<Root> Minor", or "Unknown" for no usable notes
        """
        return self.analyze(notes, key_signature).name

    def analyze(
        self,
        notes: List[Note],
        key_signature: Optional[KeySignature] = None,
        n_alternatives: int = 3,
    ) -> KeyInfo:
        """
        Perform full key analysis.

        Args:
            notes: Melody notes
            key_signature: Declared key; wins over estimation
            n_alternatives: Number of runner-up keys to include

        Returns:
            KeyInfo with the winning key and alternatives
        """
        pitch_classes = self._build_pitch_class_distribution(notes)

        if key_signature is not None:
            return KeyInfo(
                root=key_signature.root,
                mode=key_signature.mode.lower(),
                correlation=0.0,
                pitch_class_distribution=pitch_classes,
                from_metadata=True,
            )

        if pitch_classes.sum() == 0:
            return KeyInfo(
                root="",
                mode="",
                correlation=0.0,
                pitch_class_distribution=pitch_classes,
            )

        candidates = self._get_all_candidates(pitch_classes)
        best = max(candidates, key=lambda c: c.correlation)

        # Stable sort keeps evaluation order among equal scores
        ranked = sorted(candidates, key=lambda c: c.correlation, reverse=True)
        alternatives = [c for c in ranked if c is not best][:n_alternatives]

        return KeyInfo(
            root=best.root,
            mode=best.mode,
            correlation=best.correlation,
            pitch_class_distribution=pitch_classes,
            alternatives=alternatives,
            relative_key=self._get_relative_key(best.root, best.mode),
            parallel_key=self._get_parallel_key(best.root, best.mode),
        )

    def _build_pitch_class_distribution(self, notes: List[Note]) -> np.ndarray:
        """
        Build a duration-weighted pitch class distribution.

        Args:
            notes: List of notes

        Returns:
            12-element numpy array of pitch class weights (sums to 1, or all zero)
        """
        pitch_classes = np.zeros(12)

        for note in notes:
            pc = pitch_class_index(note.name)
            if pc == -1:
                continue
            weight = note.duration if note.duration > 0 else 1.0
            pitch_classes[pc] += weight

        # Normalize
        if pitch_classes.sum() > 0:
            pitch_classes /= pitch_classes.sum()

        return pitch_classes

    def _get_all_candidates(self, pitch_classes: np.ndarray) -> List[KeyCandidate]:
        """
        Score every (rotation, mode) pair in evaluation order.

        Args:
            pitch_classes: 12-element pitch class distribution

        Returns:
            24 KeyCandidate objects, rotation 0 first, major before minor
        """
        candidates = []

        for shift in range(12):
            root = PITCH_NAMES[shift]
            rotated = np.roll(pitch_classes, -shift)

            major_corr = self._correlate(rotated, self.major_profile)
            candidates.append(KeyCandidate(root, "major", major_corr))

            minor_corr = self._correlate(rotated, self.minor_profile)
            candidates.append(KeyCandidate(root, "minor", minor_corr))

        return candidates

    def _correlate(self, distribution: np.ndarray, profile: np.ndarray) -> float:
        """
        Score a rotated distribution against a profile.

        Handles degenerate input gracefully in Pearson mode.
        """
        if self.method == "dot":
            return float(np.dot(distribution, profile))

        if distribution.std() == 0 or profile.std() == 0:
            return 0.0

        corr = np.corrcoef(distribution, profile)[0, 1]

        # Handle NaN (can occur with degenerate input)
        if np.isnan(corr):
            return 0.0

        return float(corr)

    def _get_relative_key(self, root: str, mode: str) -> Optional[str]:
        """
        Get the relative major/minor key.

        Relative minor is 3 semitones down from major.
        Relative major is 3 semitones up from minor.
        """
        root_idx = PITCH_NAMES.index(root)

        if mode == "major":
            return f"{PITCH_NAMES[(root_idx - 3) % 12]} Minor"
        elif mode == "minor":
            return f"{PITCH_NAMES[(root_idx + 3) % 12]} Major"

        return None

    def _get_parallel_key(self, root: str, mode: str) -> Optional[str]:
        """
        Get the parallel major/minor key (same root, different mode).
        """
        if mode == "major":
            return f"{root} Minor"
        elif mode == "minor":
            return f"{root} Major"
        return None
