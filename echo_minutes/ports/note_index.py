"""NoteIndexPort — abstract interface for the corpus of known note titles."""

from abc import ABC, abstractmethod


class NoteIndexPort(ABC):
    @abstractmethod
    def titles(self) -> list[str]:
        """Return known note titles in corpus order."""
