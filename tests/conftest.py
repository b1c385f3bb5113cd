"""Shared fixtures for storyreel tests."""

from __future__ import annotations

import shutil
import subprocess
from pathlib import Path
from typing import Callable, List, Optional

import pytest

from storyreel.errors import FFmpegError
from storyreel.models import SceneInput


class FFmpegRecorder:
    """Stand-in for run_ffmpeg that records calls and writes the output file."""

    def __init__(self) -> None:
        self.calls: List[List[str]] = []
        self.failures: List[Optional[str]] = []
        self.on_call: Optional[Callable[[List[str]], None]] = None

    def fail_next(self, *messages: Optional[str]) -> None:
        """Queue outcomes: a message makes that call fail, None lets it succeed."""
        self.failures.extend(messages)

    def __call__(self, args, timeout=None) -> None:
        args = list(args)
        self.calls.append(args)
        if self.on_call is not None:
            self.on_call(args)
        if self.failures:
            message = self.failures.pop(0)
            if message is not None:
                Path(args[-1]).write_bytes(b"partial")
                raise FFmpegError(["ffmpeg", *args], 1, message)
        Path(args[-1]).write_bytes(b"video")


@pytest.fixture
def ffmpeg_recorder(monkeypatch: pytest.MonkeyPatch) -> FFmpegRecorder:
    recorder = FFmpegRecorder()
    monkeypatch.setattr("storyreel.editor.composer.run_ffmpeg", recorder)
    monkeypatch.setattr("storyreel.editor.concat.run_ffmpeg", recorder)
    return recorder


@pytest.fixture
def fixed_duration(monkeypatch: pytest.MonkeyPatch) -> Callable[[float], None]:
    """Make duration probing in the composer return a fixed value."""

    def _set(value: float) -> None:
        monkeypatch.setattr(
            "storyreel.editor.composer.measure_duration",
            lambda path, fallback: value,
        )

    return _set


@pytest.fixture
def scene_files(tmp_path: Path) -> Callable[[str], tuple[Path, Path]]:
    """Create placeholder audio and image files for a scene."""

    def _make(name: str) -> tuple[Path, Path]:
        audio = tmp_path / f"{name}.wav"
        image = tmp_path / f"{name}.png"
        audio.write_bytes(b"RIFF")
        image.write_bytes(b"\x89PNG")
        return audio, image

    return _make


def make_scene(
    group_id: str,
    audio: Path | str = "audio.wav",
    images: Optional[List[str]] = None,
    text: Optional[str] = None,
    subtitle: Optional[str] = None,
    duration: float = 5.0,
) -> SceneInput:
    return SceneInput(
        group_id=group_id,
        title=f"Scene {group_id}",
        audio_location=str(audio),
        duration_hint=duration,
        narrative_text=text,
        existing_subtitle_location=subtitle,
        image_locations=images if images is not None else ["image.png"],
    )


@pytest.fixture
def ffmpeg_bin() -> str:
    """Path to a real ffmpeg, or skip."""
    path = shutil.which("ffmpeg")
    if path is None:
        pytest.skip("ffmpeg not installed")
    return path


def ffmpeg_has_filter(ffmpeg: str, name: str) -> bool:
    result = subprocess.run(
        [ffmpeg, "-hide_banner", "-filters"],
        capture_output=True,
        text=True,
        check=False,
    )
    return any(line.split()[1:2] == [name] for line in result.stdout.splitlines() if line.strip())
