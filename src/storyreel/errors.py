"""Error types raised by the composition pipeline."""

from pathlib import Path
from typing import Optional, Sequence, Union

MISSING_ASSET_CODE = "storyreel.asset.missing"
ASSET_RESOLUTION_CODE = "storyreel.asset.resolution_failed"
FFMPEG_NOT_FOUND_CODE = "storyreel.ffmpeg.not_found"
FFMPEG_PROCESS_CODE = "storyreel.ffmpeg.process_failed"
SCENE_COMPOSITION_CODE = "storyreel.scene.composition_failed"
CONCATENATION_CODE = "storyreel.concat.failed"


class StoryreelError(RuntimeError):
    """Runtime error with a stable error code."""

    def __init__(self, code: str, message: str) -> None:
        super().__init__(message)
        self.code = code


class MissingAssetError(StoryreelError):
    """An audio, image or subtitle file is absent at resolution time."""

    def __init__(self, scene_id: Optional[str], path: Union[str, Path]) -> None:
        self.scene_id = scene_id
        self.path = Path(path)
        where = f"scene '{scene_id}'" if scene_id else "input"
        super().__init__(MISSING_ASSET_CODE, f"Missing asset for {where}: {self.path}")


class AssetResolutionError(StoryreelError):
    """A remote or embedded asset could not be materialized locally."""

    def __init__(self, message: str) -> None:
        super().__init__(ASSET_RESOLUTION_CODE, message)


class FFmpegNotFoundError(StoryreelError):
    """No usable ffmpeg executable could be located."""

    def __init__(self, message: str) -> None:
        super().__init__(FFMPEG_NOT_FOUND_CODE, message)


class FFmpegError(StoryreelError):
    """ffmpeg exited with an error, could not be spawned, or timed out."""

    def __init__(
        self,
        command: Sequence[str],
        returncode: Optional[int],
        stderr: str,
    ) -> None:
        self.command = list(command)
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no diagnostic output"
        status = f"exit code {returncode}" if returncode is not None else "no exit code"
        super().__init__(FFMPEG_PROCESS_CODE, f"ffmpeg failed ({status}): {detail}")


class SceneCompositionError(StoryreelError):
    """Encoding a single scene segment failed."""

    def __init__(self, scene_id: str, cause: str) -> None:
        self.scene_id = scene_id
        self.cause = cause
        super().__init__(
            SCENE_COMPOSITION_CODE,
            f"Failed to compose scene '{scene_id}': {cause}",
        )


class ConcatenationError(StoryreelError):
    """Joining segment files into the final video failed."""

    def __init__(self, message: str) -> None:
        super().__init__(CONCATENATION_CODE, message)
