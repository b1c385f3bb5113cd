"""Render run state model."""

from typing import List, Optional
from enum import Enum
from pydantic import BaseModel, Field

from .segment import FinalVideo, SceneVideoSegment


class RunState(str, Enum):
    """Render run state enum."""
    INIT = "init"
    COMPOSING = "composing"
    CONCATENATING = "concatenating"
    COMPLETED = "completed"
    FAILED = "failed"


class RenderRun(BaseModel):
    """Progress record for one pipeline run."""

    state: RunState = Field(default=RunState.INIT, description="Current state")
    segments: List[SceneVideoSegment] = Field(default_factory=list, description="Rendered segments")
    final_video: Optional[FinalVideo] = Field(None, description="Concatenated output")
    errors: List[str] = Field(default_factory=list, description="Error messages")
    failed_stage: Optional[RunState] = Field(None, description="State the run was in when it failed")

    class Config:
        """Pydantic config."""
        frozen = False

    def fail(self, message: str) -> None:
        self.failed_stage = self.state
        self.state = RunState.FAILED
        self.errors.append(message)
