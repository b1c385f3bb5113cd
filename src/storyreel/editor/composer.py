"""Per-scene segment composition: looped still image + narration + burned subtitles."""

import logging
import re
import uuid
from pathlib import Path
from typing import List, Optional

from ..errors import FFmpegError, MissingAssetError, SceneCompositionError
from ..models import SceneInput, SceneVideoSegment, SubtitleCue
from ..subtitles import DEFAULT_MIN_CUE_CHARS, build_cues, read_srt_text, reformat_two_line, write_srt
from .audio import measure_duration
from .ffmpeg import encoding_profile_args, escape_filter_value, filter_path, run_ffmpeg

logger = logging.getLogger(__name__)

SUBTITLE_MODES = ("sentence", "two_line")

_UNSAFE_FILENAME_CHARS = re.compile(r"[^A-Za-z0-9_-]+")


def subtitle_style() -> str:
    """Return the libass ``force_style`` used for every scene."""
    parts = [
        "Alignment=2",  # bottom center
        "MarginV=80",
        "FontSize=48",
        "BorderStyle=1",  # outline + drop shadow
        "Outline=2",
        "Shadow=1",
        "PrimaryColour=&H00FFFFFF",
        "OutlineColour=&H00000000",
        "BackColour=&H80000000",
    ]
    return ",".join(parts)


def scene_token(group_id: str) -> str:
    """Build a filename-safe token unique to one composition attempt."""
    safe = _UNSAFE_FILENAME_CHARS.sub("_", group_id).strip("_") or "scene"
    return f"{safe[:40]}_{uuid.uuid4().hex[:10]}"


class SceneComposer:
    """Renders one SceneInput into one MP4 segment with ffmpeg."""

    WIDTH = 1080
    HEIGHT = 1920

    def __init__(
        self,
        work_dir: Path,
        subtitle_mode: str = "sentence",
        min_cue_chars: int = DEFAULT_MIN_CUE_CHARS,
        ffmpeg_timeout: Optional[float] = None,
    ) -> None:
        """Initialize the composer.

        Args:
            work_dir: Directory for segments and transient subtitle files.
            subtitle_mode: Cue layout for narration text, 'sentence' or 'two_line'.
                Caller-supplied SRT text is always reformatted to two-line blocks.
            min_cue_chars: Merge threshold for sentence mode.
            ffmpeg_timeout: Seconds before an encode is killed.
        """
        if subtitle_mode not in SUBTITLE_MODES:
            raise ValueError(f"Unknown subtitle mode: {subtitle_mode}. Available: {list(SUBTITLE_MODES)}")

        self.work_dir = Path(work_dir)
        self.subtitle_mode = subtitle_mode
        self.min_cue_chars = min_cue_chars
        self.ffmpeg_timeout = ffmpeg_timeout

    def build_subtitle_cues(
        self,
        scene: SceneInput,
        subtitle_path: Optional[Path],
        duration: float,
    ) -> List[SubtitleCue]:
        """Produce timed cues for a scene.

        A caller-supplied SRT keeps its text but its timing is recomputed
        against ``duration``. Otherwise the narration text is used.
        """
        if subtitle_path is not None:
            text = read_srt_text(subtitle_path)
            logger.debug(f"Reusing {len(text)} chars of subtitle text from {subtitle_path.name}")
            return reformat_two_line(text, duration)

        if not scene.narrative_text or not scene.narrative_text.strip():
            return []

        if self.subtitle_mode == "two_line":
            return reformat_two_line(scene.narrative_text, duration)
        return build_cues(scene.narrative_text, duration, self.min_cue_chars)

    def build_video_filter(self, subtitle_path: Optional[Path] = None) -> str:
        """Build the letterbox filter chain, optionally burning in subtitles."""
        video_filter = (
            f"scale={self.WIDTH}:{self.HEIGHT}:force_original_aspect_ratio=decrease,"
            f"pad={self.WIDTH}:{self.HEIGHT}:(ow-iw)/2:(oh-ih)/2"
        )
        if subtitle_path is not None:
            video_filter += (
                f",subtitles={filter_path(subtitle_path)}"
                f":charenc=UTF-8"
                f":force_style={escape_filter_value(subtitle_style())}"
            )
        return video_filter

    def build_encode_args(
        self,
        image_path: Path,
        audio_path: Path,
        video_filter: str,
        duration: float,
        output_path: Path,
    ) -> List[str]:
        """Build ffmpeg arguments for one segment."""
        return [
            "-y",
            "-loop", "1",
            "-i", str(image_path),
            "-i", str(audio_path),
            "-map", "0:v:0",
            "-map", "1:a:0",
            "-vf", video_filter,
            *encoding_profile_args(),
            "-shortest",
            "-t", f"{duration:.3f}",
            "-movflags", "+faststart",
            str(output_path),
        ]

    def compose(
        self,
        scene: SceneInput,
        audio_path: Path,
        image_path: Path,
        order: int,
        subtitle_path: Optional[Path] = None,
    ) -> SceneVideoSegment:
        """Render one scene segment.

        Args:
            scene: Scene being rendered.
            audio_path: Local narration audio.
            image_path: Local still image.
            order: Position of the scene in the final video.
            subtitle_path: Local caller-supplied SRT, if any. It is read but
                never modified or deleted.

        Returns:
            Descriptor of the written segment.

        Raises:
            MissingAssetError: If an input file does not exist.
            SceneCompositionError: If ffmpeg fails.
        """
        for path in (audio_path, image_path, subtitle_path):
            if path is not None and not path.is_file():
                raise MissingAssetError(scene.group_id, path)

        self.work_dir.mkdir(parents=True, exist_ok=True)
        token = scene_token(scene.group_id)
        output_path = self.work_dir / f"segment_{token}.mp4"

        duration = measure_duration(audio_path, scene.duration_hint)
        logger.info(f"Composing scene '{scene.group_id}' ({duration:.2f}s) -> {output_path.name}")

        try:
            cues = self.build_subtitle_cues(scene, subtitle_path, duration)
        except (OSError, UnicodeDecodeError) as e:
            raise SceneCompositionError(scene.group_id, f"could not read subtitles: {e}") from e

        rendered_srt: Optional[Path] = None
        try:
            if cues:
                rendered_srt = write_srt(cues, self.work_dir / f"subtitle_{token}.srt")
                logger.debug(f"Scene '{scene.group_id}': {len(cues)} subtitle cues")
            else:
                logger.warning(f"Scene '{scene.group_id}' has no subtitle text, rendering without subtitles")

            if output_path.exists():
                output_path.unlink()

            args = self.build_encode_args(
                image_path,
                audio_path,
                self.build_video_filter(rendered_srt),
                duration,
                output_path,
            )
            run_ffmpeg(args, timeout=self.ffmpeg_timeout)
        except FFmpegError as e:
            logger.error(f"ffmpeg failed for scene '{scene.group_id}': {e}")
            output_path.unlink(missing_ok=True)
            raise SceneCompositionError(scene.group_id, str(e)) from e
        finally:
            if rendered_srt is not None:
                rendered_srt.unlink(missing_ok=True)

        logger.info(f"Scene '{scene.group_id}' rendered: {output_path}")
        return SceneVideoSegment(
            group_id=scene.group_id,
            file_path=output_path,
            duration_seconds=duration,
            order=order,
        )
