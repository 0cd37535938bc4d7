"""NoteStorePort — abstract interface for persisting composed notes."""

from abc import ABC, abstractmethod


class NoteStorePort(ABC):
    @abstractmethod
    def save(self, filename: str, content: str) -> str:
        """Persist a note verbatim. Returns the location written."""
