"""MarkdownNoteStore — writes composed notes into a folder of the vault."""

import re
import logging
from pathlib import Path

from echo_minutes.ports.note_store import NoteStorePort

logger = logging.getLogger(__name__)


def safe_filename(name: str, max_len: int = 120) -> str:
    name = re.sub(r"[\/\\:\*\?\"<>\|]+", "-", name.strip())
    name = re.sub(r"\s+", " ", name).strip()
    return name[:max_len].rstrip() or "Untitled"


class MarkdownNoteStore(NoteStorePort):
    def __init__(self, vault_dir: str, folder: str = "Meetings"):
        self._out_dir = Path(vault_dir) / folder

    def save(self, filename: str, content: str) -> str:
        self._out_dir.mkdir(parents=True, exist_ok=True)
        stem = filename[:-3] if filename.endswith(".md") else filename
        out_path = self._out_dir / f"{safe_filename(stem)}.md"
        if out_path.exists():
            raise FileExistsError(f"Note already exists: {out_path}")
        out_path.write_text(content, encoding="utf-8")
        logger.info(f"Meeting note created: {out_path}")
        return str(out_path)
