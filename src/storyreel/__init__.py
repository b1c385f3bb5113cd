"""Scene-to-video composition with synchronized burned-in subtitles."""

__version__ = "0.1.0"
