"""Repackage subtitle text into blocks of at most two lines."""

from typing import List

from ..models.subtitle import SubtitleCue
from .cues import allocate_timings, split_sentences

MAX_LINES_PER_BLOCK = 2


def group_two_line_blocks(text: str) -> List[str]:
    """Group sentences into display blocks of at most two sentences.

    Args:
        text: Subtitle or narration text.

    Returns:
        Block texts in order. If no sentences can be found the original
        text is returned verbatim as one block.
    """
    sentences = split_sentences(text)
    if not sentences:
        return [text]

    blocks: List[str] = []
    current: List[str] = []
    for sentence in sentences:
        if len(current) == MAX_LINES_PER_BLOCK:
            blocks.append(" ".join(current))
            current = []
        current.append(sentence)

    if current:
        blocks.append(" ".join(current))
    return blocks


def reformat_two_line(text: str, total_duration: float) -> List[SubtitleCue]:
    """Build cues from two-line blocks, timed uniformly over the block count.

    Blank text has nothing to display and yields no cues.
    """
    blocks = [block for block in group_two_line_blocks(text) if block.strip()]
    if not blocks:
        return []
    return allocate_timings(blocks, total_duration)
