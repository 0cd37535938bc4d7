"""RecorderPort — abstract interface for microphone capture."""

from abc import ABC, abstractmethod


class RecorderPort(ABC):
    @abstractmethod
    def start(self, output_path: str) -> None:
        """Begin capturing into output_path."""

    @abstractmethod
    def stop(self) -> bytes:
        """Stop capturing, release the device and return the recorded blob."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop capturing, release the device and discard partial audio."""
