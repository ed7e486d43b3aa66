"""Processing layer - Track-level preparation.

This layer prepares parsed tracks for analysis:
- Track filtering (sparse and percussion tracks)
- Quantization (snap the melody to a sixteenth grid)
"""

from .filter import TrackFilter
from .quantize import Quantizer

__all__ = [
    "TrackFilter",
    "Quantizer",
]
