"""In-process decoding of WAV, FLAC and OGG via python-soundfile."""

from .audio import SoundfileAudioAdapter

__all__ = ["SoundfileAudioAdapter"]
