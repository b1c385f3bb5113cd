"""Configuration management."""

import os
from pathlib import Path
from typing import Optional

from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    value = os.getenv(name, "").strip()
    return float(value) if value else None


class Config(BaseModel):
    """Application configuration."""

    # Paths
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("STORYREEL_WORKSPACE", ".")),
        description="Root directory for relative asset paths"
    )
    work_dir: Path = Field(
        default_factory=lambda: Path(os.getenv("STORYREEL_WORK_DIR", "temp-videos")),
        description="Working directory for segments and transient files"
    )

    # Encoding engine
    ffmpeg_path: str = Field(
        default_factory=lambda: os.getenv("FFMPEG_PATH", ""),
        description="Explicit path to the ffmpeg executable"
    )
    ffmpeg_timeout: Optional[float] = Field(
        default_factory=lambda: _optional_float("FFMPEG_TIMEOUT"),
        description="Seconds before an ffmpeg invocation is killed (None = no limit)"
    )

    # Assets
    download_timeout: float = Field(
        default_factory=lambda: float(os.getenv("ASSET_DOWNLOAD_TIMEOUT", "30")),
        description="HTTP timeout for remote asset downloads"
    )

    # Subtitles
    min_cue_chars: int = Field(
        default_factory=lambda: int(os.getenv("STORYREEL_MIN_CUE_CHARS", "18")),
        description="Minimum characters per narration cue before merging"
    )
    subtitle_mode: str = Field(
        default_factory=lambda: os.getenv("STORYREEL_SUBTITLE_MODE", "sentence"),
        description="Cue layout for narration text: 'sentence' or 'two_line'"
    )

    # Scheduling
    max_workers: int = Field(
        default_factory=lambda: int(os.getenv("STORYREEL_MAX_WORKERS", "1")),
        description="Scenes composed concurrently (1 = strictly sequential)"
    )

    class Config:
        """Pydantic config."""
        frozen = False

    def validate_settings(self) -> None:
        """Validate configuration values.

        Raises:
            ValueError: If any setting is out of range.
        """
        problems: list[str] = []

        if self.min_cue_chars < 0:
            problems.append("STORYREEL_MIN_CUE_CHARS must be >= 0")
        if self.subtitle_mode not in ("sentence", "two_line"):
            problems.append(
                f"STORYREEL_SUBTITLE_MODE must be 'sentence' or 'two_line'. Got: {self.subtitle_mode}"
            )
        if self.max_workers < 1:
            problems.append("STORYREEL_MAX_WORKERS must be >= 1")
        if self.download_timeout <= 0:
            problems.append("ASSET_DOWNLOAD_TIMEOUT must be positive")
        if self.ffmpeg_timeout is not None and self.ffmpeg_timeout <= 0:
            problems.append("FFMPEG_TIMEOUT must be positive when set")

        if problems:
            raise ValueError(f"Invalid configuration: {'; '.join(problems)}")


# Global config instance
config = Config()
