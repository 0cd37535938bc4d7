"""whisper.cpp CLI adapter (subprocess, sidecar transcript file)."""

from .transcription import WhisperCppTranscriptionAdapter

__all__ = ["WhisperCppTranscriptionAdapter"]
