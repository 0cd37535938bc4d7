"""Framework-agnostic domain models for echo-minutes.

The API layer keeps its own Pydantic DTOs (see models.py) with mappers at
the boundary.
"""

from dataclasses import dataclass, field
from typing import Optional
from datetime import datetime

import numpy as np


@dataclass
class AudioSamples:
    """Decoded float samples in [-1, 1], shape (frames,) or (frames, channels)."""
    data: np.ndarray
    sample_rate: int

    @property
    def channels(self) -> int:
        return 1 if self.data.ndim == 1 else self.data.shape[1]

    @property
    def frames(self) -> int:
        return self.data.shape[0]

    @property
    def duration_seconds(self) -> float:
        return self.frames / self.sample_rate if self.sample_rate else 0.0


@dataclass
class TranscriptionResult:
    """Best-effort transcript. Empty text is a valid outcome."""
    text: str
    sidecar_found: bool = True
    stderr_tail: str = ""


@dataclass(frozen=True)
class ActionItem:
    text: str

    def render(self) -> str:
        return f"- [ ] {self.text}"


@dataclass(frozen=True)
class Decision:
    text: str

    def render(self) -> str:
        return f"- {self.text}"


@dataclass(frozen=True)
class NoteReference:
    title: str

    def render(self) -> str:
        return f"- [[{self.title}]]"


@dataclass
class MeetingMetadata:
    """Literal values substituted into the note template."""
    title: str
    attendees: str = ""
    recorded_at: datetime = field(default_factory=datetime.now)
    duration_seconds: float = 0.0

    @property
    def date(self) -> str:
        return self.recorded_at.date().isoformat()

    @property
    def time(self) -> str:
        return self.recorded_at.strftime("%H:%M")

    @property
    def duration(self) -> str:
        return format_duration(self.duration_seconds)


@dataclass
class MeetingNote:
    """Composed meeting note, ready to be persisted verbatim."""
    filename: str
    content: str
    transcript: str
    action_items: list[ActionItem] = field(default_factory=list)
    decisions: list[Decision] = field(default_factory=list)
    references: list[NoteReference] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    model: Optional[str] = None  # engine that produced the transcript
    path: Optional[str] = None


def format_duration(seconds: float) -> str:
    """Format elapsed seconds as zero-padded HH:MM:SS."""
    total = max(0, int(seconds))
    hours, rest = divmod(total, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"
