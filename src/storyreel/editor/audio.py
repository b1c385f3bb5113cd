"""Audio duration probing."""

import logging
from pathlib import Path

from moviepy import AudioFileClip

logger = logging.getLogger(__name__)


def load_audio(audio_path: Path) -> AudioFileClip:
    """Load an audio file.

    Args:
        audio_path: Path to the audio file.

    Returns:
        AudioFileClip instance.

    Raises:
        FileNotFoundError: If audio file doesn't exist.
    """
    if not audio_path.exists():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    return AudioFileClip(str(audio_path))


def get_audio_duration(audio_path: Path) -> float:
    """Get the duration of an audio file.

    Args:
        audio_path: Path to audio file.

    Returns:
        Duration in seconds.
    """
    audio = load_audio(audio_path)
    try:
        return float(audio.duration)
    finally:
        audio.close()


def measure_duration(audio_path: Path, fallback: float) -> float:
    """Probe the real audio length, falling back to the producer's estimate.

    Args:
        audio_path: Path to the narration audio.
        fallback: Duration hint used when probing fails.

    Returns:
        Measured duration in seconds, or ``fallback``.
    """
    try:
        duration = get_audio_duration(audio_path)
    except Exception as e:
        logger.warning(f"Could not probe {audio_path.name}, using duration hint {fallback}s: {e}")
        return fallback

    if not duration or duration <= 0:
        logger.warning(f"Probe returned {duration} for {audio_path.name}, using duration hint {fallback}s")
        return fallback

    if abs(duration - fallback) > 0.01:
        logger.info(f"Measured {duration:.3f}s for {audio_path.name} (hint was {fallback}s)")
    return duration
