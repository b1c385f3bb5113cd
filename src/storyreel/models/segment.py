"""Rendered segment and final video models."""

from pathlib import Path
from typing import List
from pydantic import BaseModel, Field


class SceneVideoSegment(BaseModel):
    """One scene's rendered MP4 file."""

    group_id: str = Field(..., description="Scene identifier the segment was rendered from")
    file_path: Path = Field(..., description="Location of the MP4 segment")
    duration_seconds: float = Field(..., description="Measured audio length the segment spans", gt=0)
    order: int = Field(..., description="Position in the final video (0-based)", ge=0)


class FinalVideo(BaseModel):
    """Concatenated output video."""

    file_path: Path = Field(..., description="Location of the final MP4")
    source_segments: List[SceneVideoSegment] = Field(
        default_factory=list, description="Segments in playback order"
    )

    @property
    def total_duration(self) -> float:
        return sum(segment.duration_seconds for segment in self.source_segments)
