"""Subtitle cue model."""

from dataclasses import dataclass


@dataclass(frozen=True)
class SubtitleCue:
    """One timed subtitle entry."""

    index: int
    start: float
    end: float
    text: str

    def __post_init__(self) -> None:
        if self.index < 1:
            raise ValueError(f"Cue index must be 1-based, got {self.index}")
        if self.start < 0:
            raise ValueError(f"Cue {self.index} starts before zero: {self.start}")
        if self.end <= self.start:
            raise ValueError(
                f"Cue {self.index} must end after it starts: {self.start} -> {self.end}"
            )
        if not self.text.strip():
            raise ValueError(f"Cue {self.index} has empty text")

    @property
    def duration(self) -> float:
        return self.end - self.start
