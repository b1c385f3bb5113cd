"""ffmpeg discovery, invocation and argument escaping."""

import logging
import os
import shutil
import subprocess
from pathlib import Path
from typing import Optional, Sequence

from ..config import config
from ..errors import FFmpegError, FFmpegNotFoundError

logger = logging.getLogger(__name__)

# Fixed encoding profile shared by segment composition and re-encode concatenation
VIDEO_CODEC = "libx264"
AUDIO_CODEC = "aac"
AUDIO_BITRATE = "192k"
PIXEL_FORMAT = "yuv420p"
FRAME_RATE = 30

STDERR_TAIL_LINES = 20

# Characters with special meaning at each level of ffmpeg's filter parsing
_OPTION_SPECIAL_CHARS = ("\\", "'", ":")
_GRAPH_SPECIAL_CHARS = ("\\", "'", "[", "]", ",", ";")


def encoding_profile_args() -> list[str]:
    """Return codec, pixel format and frame rate arguments."""
    return [
        "-c:v", VIDEO_CODEC,
        "-pix_fmt", PIXEL_FORMAT,
        "-r", str(FRAME_RATE),
        "-c:a", AUDIO_CODEC,
        "-b:a", AUDIO_BITRATE,
    ]


def locate_ffmpeg(explicit_path: Optional[str] = None) -> str:
    """Find the ffmpeg executable.

    Lookup order: explicit path (or FFMPEG_PATH), ``ffmpeg`` on PATH, then
    the binary bundled with imageio-ffmpeg.

    Returns:
        Path to the executable.

    Raises:
        FFmpegNotFoundError: If no executable is found.
    """
    candidate = explicit_path or config.ffmpeg_path
    if candidate:
        if os.path.isfile(candidate):
            return candidate
        logger.warning(f"FFMPEG_PATH does not exist, searching elsewhere: {candidate}")

    on_path = shutil.which("ffmpeg")
    if on_path:
        return on_path

    try:
        import imageio_ffmpeg

        return imageio_ffmpeg.get_ffmpeg_exe()
    except (ImportError, RuntimeError) as e:
        raise FFmpegNotFoundError(
            "ffmpeg not found. Install it, add it to PATH, or set FFMPEG_PATH."
        ) from e


def _stderr_tail(stderr: Optional[str]) -> str:
    if not stderr:
        return ""
    lines = stderr.strip().splitlines()
    return "\n".join(lines[-STDERR_TAIL_LINES:])


def run_ffmpeg(args: Sequence[str], timeout: Optional[float] = None) -> None:
    """Run ffmpeg and wait for it to exit.

    Args:
        args: Arguments after the executable name.
        timeout: Seconds before the process is killed. None waits forever.

    Raises:
        FFmpegError: If ffmpeg cannot start, times out or exits non-zero.
    """
    command = [locate_ffmpeg(), "-hide_banner", "-nostdin", *args]
    logger.debug(f"Running: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            capture_output=True,
            text=True,
            errors="replace",
            timeout=timeout,
        )
    except subprocess.TimeoutExpired as e:
        stderr = e.stderr.decode("utf-8", "replace") if isinstance(e.stderr, bytes) else e.stderr
        raise FFmpegError(command, None, f"timed out after {timeout}s\n{_stderr_tail(stderr)}") from e
    except OSError as e:
        raise FFmpegError(command, None, f"could not start ffmpeg: {e}") from e

    if result.returncode != 0:
        raise FFmpegError(command, result.returncode, _stderr_tail(result.stderr))


def _escape_chars(value: str, special: Sequence[str]) -> str:
    # Backslash comes first in both tables so escapes are not doubled
    for char in special:
        value = value.replace(char, "\\" + char)
    return value


def escape_filter_value(value: str) -> str:
    """Escape a filter option value for use inside a ``-vf`` filtergraph.

    Applies the option-level escaping followed by the filtergraph-level
    escaping described in the ffmpeg-filters documentation.
    """
    return _escape_chars(_escape_chars(value, _OPTION_SPECIAL_CHARS), _GRAPH_SPECIAL_CHARS)


def filter_path(path: Path) -> str:
    """Return an escaped, forward-slash path for a filter option."""
    return escape_filter_value(path.resolve().as_posix())


def quote_concat_path(path: Path) -> str:
    """Quote a path for a concat demuxer ``file`` directive."""
    escaped = path.resolve().as_posix().replace("'", "'\\''")
    return f"'{escaped}'"
