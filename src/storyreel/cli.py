"""CLI entry point for the scene video composer."""

import logging
import typer
from pathlib import Path
from typing import List, Optional
from enum import Enum

from . import __version__
from .config import config
from .models import Manifest, RenderRun

app = typer.Typer(
    name="storyreel",
    help="Compose narrated still-image scenes into a subtitled vertical video",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"storyreel version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """storyreel - Turn narrated scenes into one subtitled video."""
    pass


class SubtitleMode(str, Enum):
    """Cue layout for narration text."""
    SENTENCE = "sentence"
    TWO_LINE = "two-line"


@app.command()
def status(
    script: Path = typer.Option(
        Path("scenes.yaml"),
        "--script",
        "-s",
        help="Path to scenes YAML file",
        exists=False,
        file_okay=True,
        dir_okay=False
    )
) -> None:
    """Show manifest summary."""
    if not script.exists():
        typer.echo(f"❌ No manifest found at {script}")
        raise typer.Exit(1)

    try:
        manifest = Manifest.from_yaml(script)
    except Exception as e:
        typer.echo(f"❌ Error loading manifest: {e}")
        raise typer.Exit(1)

    typer.echo(f"📁 Project: {manifest.project_name}")
    typer.echo(f"   Output: {manifest.output_file}")
    typer.echo(f"   Scenes: {len(manifest.scenes)}")
    typer.echo(f"   Estimated duration: {manifest.total_duration_hint:.1f}s")

    typer.echo("\n📽️  Scenes:")
    for scene in manifest.scenes:
        subtitle_icon = "💬" if scene.has_subtitle_source else "🔇"
        typer.echo(f"   {subtitle_icon} {scene.group_id}: {scene.duration_hint}s  {scene.title}".rstrip())
        if scene.narrative_text:
            preview = scene.narrative_text[:60] + "..." if len(scene.narrative_text) > 60 else scene.narrative_text
            typer.echo(f"      → {preview}")


@app.command()
def render(
    script: Path = typer.Option(
        Path("scenes.yaml"),
        "--script",
        "-s",
        help="Path to scenes YAML file",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Final video path (overrides the manifest)"
    ),
    work_dir: Optional[Path] = typer.Option(
        None,
        "--work-dir",
        "-w",
        help="Working directory for segments and transient files"
    ),
    workers: Optional[int] = typer.Option(
        None,
        "--workers",
        "-p",
        help="Scenes composed concurrently (default: sequential)",
        min=1,
        max=8
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Render every scene and concatenate them into the final video."""
    from .pipeline import ScenePipeline

    setup_logging(verbose)
    typer.echo(f"🎬 Rendering {script}")

    try:
        manifest = Manifest.from_yaml(script)
    except Exception as e:
        typer.echo(f"❌ Error loading manifest: {e}")
        raise typer.Exit(1)

    if not manifest.scenes:
        typer.echo("❌ Manifest has no scenes")
        raise typer.Exit(1)

    output_path = output or Path(manifest.output_file)
    selected_work_dir = work_dir or (Path(manifest.work_dir) if manifest.work_dir else None)

    typer.echo(f"   Project: {manifest.project_name}")
    typer.echo(f"   Scenes: {len(manifest.scenes)}")
    typer.echo(f"   Output: {output_path}")

    try:
        pipeline = ScenePipeline(work_dir=selected_work_dir)
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    run = RenderRun()
    try:
        final_video = pipeline.run(manifest.scenes, output_path, run=run, max_workers=workers)
    except Exception as e:
        stage = run.failed_stage.value if run.failed_stage else "setup"
        typer.echo(f"❌ Render failed during {stage}: {e}")
        for segment in run.segments:
            typer.echo(f"   ⚠️  Leftover segment: {segment.file_path}")
        raise typer.Exit(1)

    typer.echo("\n📊 Segments:")
    for segment in final_video.source_segments:
        typer.echo(f"   ✅ {segment.order + 1}. {segment.group_id}: {segment.duration_seconds:.2f}s → {segment.file_path}")

    typer.echo(f"\n✅ Video assembled: {final_video.file_path}")
    typer.echo(f"   Duration: {final_video.total_duration:.1f}s")


@app.command()
def subtitles(
    text_file: Path = typer.Argument(
        ...,
        help="Narration text file, or an existing .srt to reformat",
        exists=True,
        file_okay=True,
        dir_okay=False
    ),
    duration: float = typer.Option(
        ...,
        "--duration",
        "-d",
        help="Audio duration in seconds",
        min=0.001
    ),
    mode: SubtitleMode = typer.Option(
        SubtitleMode.SENTENCE,
        "--mode",
        "-m",
        help="Cue layout (.srt input always uses two-line)"
    ),
    min_chars: int = typer.Option(
        config.min_cue_chars,
        "--min-chars",
        help="Minimum characters per cue in sentence mode",
        min=0
    ),
    output: Optional[Path] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output SRT path (prints to stdout if omitted)"
    ),
) -> None:
    """Generate an SRT document timed to an audio duration."""
    from .subtitles import build_cues, read_srt_text, reformat_two_line, serialize_srt, write_srt

    try:
        if text_file.suffix.lower() == ".srt":
            cues = reformat_two_line(read_srt_text(text_file), duration)
        else:
            text = text_file.read_text(encoding="utf-8")
            if mode == SubtitleMode.TWO_LINE:
                cues = reformat_two_line(text, duration)
            else:
                cues = build_cues(text, duration, min_chars)
    except (OSError, UnicodeDecodeError, ValueError) as e:
        typer.echo(f"❌ Error building subtitles: {e}")
        raise typer.Exit(1)

    if not cues:
        typer.echo("❌ No subtitle text found")
        raise typer.Exit(1)

    if output is None:
        typer.echo(serialize_srt(cues), nl=False)
        return

    write_srt(cues, output)
    typer.echo(f"✅ {len(cues)} cues written: {output}")


@app.command()
def merge(
    segments: List[Path] = typer.Argument(
        ...,
        help="Segment files in playback order"
    ),
    output: Path = typer.Option(
        Path("output/final.mp4"),
        "--output",
        "-o",
        help="Output file path"
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging"
    ),
) -> None:
    """Concatenate existing segment files in order."""
    from .editor import SegmentConcatenator
    from .errors import StoryreelError

    setup_logging(verbose)
    typer.echo(f"📼 Merging {len(segments)} segments")

    concatenator = SegmentConcatenator(ffmpeg_timeout=config.ffmpeg_timeout)
    try:
        result = concatenator.concatenate(segments, output)
    except StoryreelError as e:
        typer.echo(f"❌ Merge failed: {e}")
        raise typer.Exit(1)

    typer.echo(f"✅ Video merged: {result}")


if __name__ == "__main__":
    app()
