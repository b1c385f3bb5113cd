"""SRT serialization and text extraction."""

import logging
import re
from pathlib import Path
from typing import List, Sequence

from ..models.subtitle import SubtitleCue
from .timecode import format_time_range

logger = logging.getLogger(__name__)

_BLOCK_SEPARATOR = re.compile(r"\n[ \t]*\n")


def serialize_srt(cues: Sequence[SubtitleCue]) -> str:
    """Render cues as an SRT document.

    Args:
        cues: Timed cues in display order.

    Returns:
        Blocks of index, time range and text, each followed by a blank line.
    """
    lines: List[str] = []
    for cue in cues:
        lines.append(str(cue.index))
        lines.append(format_time_range(cue.start, cue.end))
        lines.append(cue.text)
        lines.append("")
    return "\n".join(lines)


def write_srt(cues: Sequence[SubtitleCue], path: Path) -> Path:
    """Write cues to ``path`` as UTF-8 SRT."""
    path.parent.mkdir(parents=True, exist_ok=True)
    content = serialize_srt(cues)
    path.write_text(content, encoding="utf-8")
    logger.debug(f"Wrote {len(cues)} subtitle cues to {path} ({len(content)} chars)")
    return path


def parse_srt_texts(content: str) -> List[str]:
    """Extract caption texts from an SRT document, discarding timing.

    Each blank-line-delimited block contributes every line after its index
    and time range; multi-line captions are joined with a space.
    """
    normalized = content.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")
    texts: List[str] = []
    for block in _BLOCK_SEPARATOR.split(normalized.strip()):
        lines = [line.strip() for line in block.strip().split("\n")]
        caption = " ".join(line for line in lines[2:] if line)
        if caption:
            texts.append(caption)
    return texts


def extract_srt_text(content: str) -> str:
    """Join all caption texts of an SRT document into one string."""
    return " ".join(parse_srt_texts(content))


def read_srt_text(path: Path) -> str:
    """Read an SRT file and return its caption text."""
    return extract_srt_text(path.read_text(encoding="utf-8-sig"))
