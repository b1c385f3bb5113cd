"""Video composition and assembly module."""

from .composer import (
    SceneComposer,
    SUBTITLE_MODES,
    subtitle_style,
    scene_token,
)
from .concat import (
    SegmentConcatenator,
    concat_list_file,
    render_concat_list,
)
from .audio import (
    load_audio,
    get_audio_duration,
    measure_duration,
)
from .ffmpeg import (
    locate_ffmpeg,
    run_ffmpeg,
    escape_filter_value,
    quote_concat_path,
    encoding_profile_args,
)

__all__ = [
    # Composer
    "SceneComposer",
    "SUBTITLE_MODES",
    "subtitle_style",
    "scene_token",
    # Concatenation
    "SegmentConcatenator",
    "concat_list_file",
    "render_concat_list",
    # Audio
    "load_audio",
    "get_audio_duration",
    "measure_duration",
    # ffmpeg
    "locate_ffmpeg",
    "run_ffmpeg",
    "escape_filter_value",
    "quote_concat_path",
    "encoding_profile_args",
]
