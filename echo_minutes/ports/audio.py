"""AudioDecodingPort — abstract interface for turning captured audio into samples."""

from abc import ABC, abstractmethod

from echo_minutes.domain.models import AudioSamples


class AudioDecodingPort(ABC):
    @abstractmethod
    def decode(self, blob: bytes, suffix: str = ".webm") -> AudioSamples:
        """Decode an encoded audio blob. Raises DecodeError on corrupt input."""
