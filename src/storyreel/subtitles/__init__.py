"""Subtitle cue generation and SRT handling."""

from .cues import (
    DEFAULT_MIN_CUE_CHARS,
    normalize_text,
    split_sentences,
    merge_short_cues,
    allocate_timings,
    build_cues,
)
from .reformat import group_two_line_blocks, reformat_two_line
from .timecode import format_timestamp, format_time_range
from .srt import (
    serialize_srt,
    write_srt,
    parse_srt_texts,
    extract_srt_text,
    read_srt_text,
)

__all__ = [
    # Cues
    "DEFAULT_MIN_CUE_CHARS",
    "normalize_text",
    "split_sentences",
    "merge_short_cues",
    "allocate_timings",
    "build_cues",
    # Reformat
    "group_two_line_blocks",
    "reformat_two_line",
    # Timecode
    "format_timestamp",
    "format_time_range",
    # SRT
    "serialize_srt",
    "write_srt",
    "parse_srt_texts",
    "extract_srt_text",
    "read_srt_text",
]
