"""Sentence segmentation, short-cue merging and uniform timing allocation."""

import logging
import re
from typing import List, Sequence

from ..models.subtitle import SubtitleCue

logger = logging.getLogger(__name__)

DEFAULT_MIN_CUE_CHARS = 18

_WHITESPACE = re.compile(r"\s+")
# A terminator only ends a sentence when whitespace follows, so "3.14" stays whole.
_SENTENCE_BREAK = re.compile(r"(?<=[.!?])\s+")


def normalize_text(text: str) -> str:
    """Collapse runs of whitespace into single spaces and trim."""
    return _WHITESPACE.sub(" ", text).strip()


def split_sentences(text: str) -> List[str]:
    """Split narration text into trimmed, non-empty sentences.

    Args:
        text: Narration text.

    Returns:
        Sentences in order. Text without a terminator is one sentence;
        blank text yields an empty list.
    """
    normalized = normalize_text(text)
    if not normalized:
        return []
    return [part.strip() for part in _SENTENCE_BREAK.split(normalized) if part.strip()]


def merge_short_cues(
    sentences: Sequence[str],
    min_chars: int = DEFAULT_MIN_CUE_CHARS,
) -> List[str]:
    """Merge sentences shorter than ``min_chars`` into their neighbours.

    Args:
        sentences: Sentence list from :func:`split_sentences`.
        min_chars: Minimum caption length in characters.

    Returns:
        Merged cue texts. Every entry reaches ``min_chars`` unless the whole
        input is shorter, in which case a single entry is returned.
    """
    merged: List[str] = []
    for sentence in sentences:
        if merged and len(merged[-1]) < min_chars:
            merged[-1] = f"{merged[-1]} {sentence}".strip()
        else:
            merged.append(sentence)

    if len(merged) >= 2 and len(merged[-1]) < min_chars:
        tail = merged.pop()
        merged[-1] = f"{merged[-1]} {tail}".strip()

    return merged


def allocate_timings(texts: Sequence[str], total_duration: float) -> List[SubtitleCue]:
    """Give each cue an equal slice of ``total_duration``.

    The last cue always ends at exactly ``total_duration`` and every cue ends
    where the next one starts.

    Args:
        texts: Cue texts in display order.
        total_duration: Measured audio length in seconds.

    Returns:
        Timed cues, indexed from 1.

    Raises:
        ValueError: If ``texts`` is empty or ``total_duration`` is not positive.
    """
    if not texts:
        raise ValueError("Cannot allocate timings for an empty cue list")
    if total_duration <= 0:
        raise ValueError(f"Total duration must be positive, got {total_duration}")

    count = len(texts)
    slice_duration = total_duration / count
    cues: List[SubtitleCue] = []

    for i, text in enumerate(texts):
        start = i * slice_duration
        end = total_duration if i == count - 1 else (i + 1) * slice_duration
        cues.append(SubtitleCue(index=i + 1, start=start, end=end, text=text))

    logger.debug(f"Allocated {count} cues of {slice_duration:.3f}s over {total_duration:.3f}s")
    return cues


def build_cues(
    text: str,
    total_duration: float,
    min_chars: int = DEFAULT_MIN_CUE_CHARS,
) -> List[SubtitleCue]:
    """Turn narration text into timed cues (segment, merge, allocate)."""
    sentences = split_sentences(text)
    if not sentences:
        return []
    return allocate_timings(merge_short_cues(sentences, min_chars), total_duration)
