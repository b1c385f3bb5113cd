"""Ordered segment concatenation with re-encode fallback."""

import logging
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List, Optional, Sequence

from ..errors import ConcatenationError, FFmpegError
from .ffmpeg import encoding_profile_args, quote_concat_path, run_ffmpeg

logger = logging.getLogger(__name__)


def render_concat_list(paths: Sequence[Path]) -> str:
    """Render a concat demuxer list, one ``file`` directive per input."""
    return "".join(f"file {quote_concat_path(path)}\n" for path in paths)


@contextmanager
def concat_list_file(paths: Sequence[Path], directory: Path) -> Iterator[Path]:
    """Write a transient concat list and remove it on exit.

    The written file is read back and compared with ``paths`` so the
    encoder never sees a list in a different order than requested.

    Yields:
        Path to the list file.
    """
    directory.mkdir(parents=True, exist_ok=True)
    list_path = directory / f"concat_{uuid.uuid4().hex[:12]}.txt"
    try:
        content = render_concat_list(paths)
        list_path.write_text(content, encoding="utf-8")
        if list_path.read_text(encoding="utf-8") != content:
            raise ConcatenationError(f"Concat list {list_path} does not match input order")
        yield list_path
    finally:
        list_path.unlink(missing_ok=True)


class SegmentConcatenator:
    """Joins segment files in order, stream-copying when possible."""

    def __init__(
        self,
        work_dir: Optional[Path] = None,
        ffmpeg_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the concatenator.

        Args:
            work_dir: Directory for the transient list file. Defaults to the
                output file's directory.
            ffmpeg_timeout: Seconds before an ffmpeg invocation is killed.
        """
        self.work_dir = Path(work_dir) if work_dir else None
        self.ffmpeg_timeout = ffmpeg_timeout

    @staticmethod
    def stream_copy_args(list_path: Path, output_path: Path) -> List[str]:
        return [
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_path),
            "-c", "copy",
            str(output_path),
        ]

    @staticmethod
    def reencode_args(list_path: Path, output_path: Path) -> List[str]:
        return [
            "-y",
            "-f", "concat",
            "-safe", "0",
            "-i", str(list_path),
            *encoding_profile_args(),
            str(output_path),
        ]

    def concatenate(self, segment_paths: Sequence[Path], output_path: Path) -> Path:
        """Concatenate segments into ``output_path``.

        Args:
            segment_paths: Segment files in playback order.
            output_path: Destination file, overwritten if present.

        Returns:
            Path to the final video.

        Raises:
            ConcatenationError: If the input list is empty, an input is
                missing, or both the stream-copy and re-encode attempts fail.
        """
        if not segment_paths:
            raise ConcatenationError("No segments provided")

        paths = [Path(p) for p in segment_paths]
        for path in paths:
            if not path.is_file():
                raise ConcatenationError(f"Input segment not found: {path.name} ({path})")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)
        list_dir = self.work_dir or output_path.parent

        logger.info(f"Concatenating {len(paths)} segments -> {output_path}")
        with concat_list_file(paths, list_dir) as list_path:
            try:
                run_ffmpeg(self.stream_copy_args(list_path, output_path), timeout=self.ffmpeg_timeout)
                logger.info(f"Stream-copy concatenation complete: {output_path}")
                return output_path
            except FFmpegError as e:
                logger.warning(f"Stream-copy concatenation failed, falling back to re-encode: {e}")
                output_path.unlink(missing_ok=True)

            try:
                run_ffmpeg(self.reencode_args(list_path, output_path), timeout=self.ffmpeg_timeout)
            except FFmpegError as e:
                output_path.unlink(missing_ok=True)
                raise ConcatenationError(f"Re-encode concatenation failed: {e}") from e

        logger.info(f"Re-encode concatenation complete: {output_path}")
        return output_path
