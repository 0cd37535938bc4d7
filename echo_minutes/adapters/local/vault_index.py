"""VaultNoteIndex — lists Markdown note titles under a vault directory."""

import logging
from pathlib import Path

from echo_minutes.ports.note_index import NoteIndexPort

logger = logging.getLogger(__name__)


class VaultNoteIndex(NoteIndexPort):
    def __init__(self, vault_dir: str):
        self._vault_dir = Path(vault_dir)

    def titles(self) -> list[str]:
        if not self._vault_dir.is_dir():
            logger.warning(f"Vault directory not found: {self._vault_dir}")
            return []
        # Hidden folders (.obsidian, .trash) hold no user notes
        notes = sorted(
            p for p in self._vault_dir.rglob("*.md")
            if not any(part.startswith(".") for part in p.relative_to(self._vault_dir).parts)
        )
        return [p.stem for p in notes]
