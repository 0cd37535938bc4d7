"""FFmpeg adapters for decoding captured audio and microphone capture."""

from .audio import FFmpegAudioAdapter
from .recorder import FFmpegRecorderAdapter

__all__ = ["FFmpegAudioAdapter", "FFmpegRecorderAdapter"]
