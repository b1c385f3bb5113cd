"""SRT time formatting."""

import math

# Absorbs binary representation error (12.345 * 1000 == 12344.999...).
_MILLISECOND_EPSILON = 1e-6


def format_timestamp(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS,mmm`` with milliseconds truncated.

    Args:
        seconds: Non-negative time offset.

    Returns:
        Zero-padded SRT timestamp, e.g. ``00:00:12,345``.

    Raises:
        ValueError: If ``seconds`` is negative or not finite.
    """
    if not math.isfinite(seconds) or seconds < 0:
        raise ValueError(f"Timestamp must be a finite non-negative number, got {seconds}")

    total_ms = math.floor(seconds * 1000 + _MILLISECOND_EPSILON)
    hours, remainder = divmod(total_ms, 3_600_000)
    minutes, remainder = divmod(remainder, 60_000)
    secs, millis = divmod(remainder, 1000)
    return f"{hours:02d}:{minutes:02d}:{secs:02d},{millis:03d}"


def format_time_range(start: float, end: float) -> str:
    return f"{format_timestamp(start)} --> {format_timestamp(end)}"
