"""Error taxonomy for the meeting pipeline.

Encoding and invocation errors abort a run. Extraction and linking never
raise: a transcript without matches simply yields empty lists.
"""

from typing import Optional


class MeetingPipelineError(Exception):
    """Base class for fatal pipeline errors."""


class DecodeError(MeetingPipelineError):
    """Captured audio could not be decoded into samples."""


class EngineNotFoundError(MeetingPipelineError):
    """Transcription executable or model file is missing."""


class TranscriptionEngineError(MeetingPipelineError):
    """Engine exited nonzero, timed out, or could not be spawned."""

    def __init__(self, message: str, returncode: Optional[int] = None, stderr: str = ""):
        super().__init__(message)
        self.returncode = returncode
        self.stderr = stderr


class SessionBusyError(MeetingPipelineError):
    """A run was requested while another one is still in flight."""


class InvalidTransitionError(MeetingPipelineError):
    """Session was asked to move to a state it cannot reach."""


class EmptyTranscriptWarning(UserWarning):
    """Engine finished but produced no transcript file."""
