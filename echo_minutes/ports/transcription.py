"""TranscriptionPort — abstract interface for speech-to-text engines.

The engine is a black box with a file-in/text-out contract, so an in-process
model or a different CLI can replace whisper.cpp without touching the
pipeline.
"""

from abc import ABC, abstractmethod
from typing import Optional

from echo_minutes.domain.models import TranscriptionResult


class TranscriptionPort(ABC):
    @abstractmethod
    def transcribe(
        self,
        audio_path: str,
        model_path: str,
        language: str = "auto",
        job_id: Optional[str] = None,
    ) -> TranscriptionResult:
        """Transcribe a 16kHz mono WAV file.

        Raises EngineNotFoundError when the engine or model is missing and
        TranscriptionEngineError when the run itself fails.
        """

    @abstractmethod
    def model_name(self) -> str:
        """Return the human-readable engine name for API responses."""
