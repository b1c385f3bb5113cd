"""Scene data model."""

from typing import List, Optional
from pydantic import BaseModel, Field


class SceneInput(BaseModel):
    """Caller-supplied unit of work: one narrated still-image scene."""

    group_id: str = Field(..., description="Opaque scene/group identifier", min_length=1)
    title: str = Field(default="", description="Human-readable scene title")
    audio_location: str = Field(..., description="Narration audio: local path, HTTP(S) URL or data URI")
    duration_hint: float = Field(..., description="Producer's duration estimate in seconds", gt=0)
    narrative_text: Optional[str] = Field(None, description="Narration text used to build subtitles")
    existing_subtitle_location: Optional[str] = Field(
        None, description="Pre-built SRT document (same location forms as audio)"
    )
    image_locations: List[str] = Field(
        default_factory=list, description="Still images; only the first is rendered"
    )

    class Config:
        """Pydantic config."""
        frozen = True

    @property
    def has_subtitle_source(self) -> bool:
        """Return True if the scene can render subtitles."""
        return bool(self.existing_subtitle_location) or bool(
            self.narrative_text and self.narrative_text.strip()
        )
