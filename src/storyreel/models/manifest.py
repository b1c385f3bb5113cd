"""Manifest data model."""

from typing import List, Optional
from pathlib import Path
from pydantic import BaseModel, Field
import yaml

from .scene import SceneInput


class Manifest(BaseModel):
    """Render job manifest: ordered scenes plus output settings."""

    project_name: str = Field(..., description="Project name")
    output_file: str = Field(default="output/final.mp4", description="Final video path")
    work_dir: Optional[str] = Field(None, description="Override for the working directory")
    scenes: List[SceneInput] = Field(default_factory=list, description="Scenes in playback order")

    class Config:
        """Pydantic config."""
        frozen = False

    @classmethod
    def from_yaml(cls, path: Path) -> "Manifest":
        """Load manifest from YAML file."""
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls(**data)

    def to_yaml(self, path: Path) -> None:
        """Save manifest to YAML file."""
        with open(path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self.model_dump(), f, default_flow_style=False, allow_unicode=True)

    @property
    def total_duration_hint(self) -> float:
        return sum(scene.duration_hint for scene in self.scenes)
