"""Export analysis results as JSON reports."""

import json
from dataclasses import asdict
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

from .core import Track
from .matching import MatchCandidate, MatchResult
from .pipeline import ProcessedSong


def _jsonable(value: Any) -> Any:
    """Convert enums and tuples for json.dumps."""
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    if isinstance(value, dict):
        return {k: _jsonable(v) for k, v in value.items()}
    return value


class ReportExporter:
    """Serialize a processed song and its recommendation."""

    def __init__(self, indent: int = 2, top_n: int = 5):
        """
        Initialize ReportExporter.

        Args:
            indent: JSON indentation
            top_n: Number of ranked alternatives to include
        """
        self.indent = indent
        self.top_n = top_n

    def track_to_dict(self, track: Track) -> Dict[str, Any]:
        return {
            "id": track.id,
            "name": track.name,
            "instrument_family": track.instrument_family,
            "channel": track.channel,
            "is_percussion": track.is_percussion,
            "note_count": track.note_count,
            "role": track.role.value,
        }

    def candidate_to_dict(self, candidate: MatchCandidate) -> Dict[str, Any]:
        return _jsonable(asdict(candidate))

    def to_dict(
        self,
        processed: ProcessedSong,
        result: MatchResult,
        alternatives: Optional[Sequence[MatchCandidate]] = None,
    ) -> Dict[str, Any]:
        """
        Build the report dictionary.

        Args:
            processed: Output of SongAnalyzer.process
            result: Output of SongAnalyzer.match
            alternatives: Ranked candidates; the first top_n are included

        Returns:
            JSON-serializable dictionary
        """
        report = {
            "song": {
                "name": processed.name,
                "bpm": processed.bpm,
                "ppq": processed.ppq,
                "duration": processed.duration,
                "key": processed.key,
            },
            "tracks": [self.track_to_dict(t) for t in processed.tracks],
            "excluded": [self.track_to_dict(t) for t in processed.excluded],
            "melody": processed.melody.id if processed.melody is not None else None,
            "suggested_scale": result.scale_id,
            "match": self.candidate_to_dict(result),
        }
        if alternatives:
            report["alternatives"] = [
                self.candidate_to_dict(c) for c in list(alternatives)[: self.top_n]
            ]
        return report

    def export(
        self,
        processed: ProcessedSong,
        result: MatchResult,
        output_path: str,
        alternatives: Optional[List[MatchCandidate]] = None,
    ) -> None:
        """
        Write the report to a JSON file.

        Args:
            processed: Processed song
            result: Recommendation
            output_path: Path to output JSON file
            alternatives: Ranked candidates to include
        """
        report = self.to_dict(processed, result, alternatives)

        # Ensure output directory exists
        Path(output_path).parent.mkdir(parents=True, exist_ok=True)

        Path(output_path).write_text(
            json.dumps(report, indent=self.indent), encoding="utf-8"
        )
