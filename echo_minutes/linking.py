"""Cross-reference a transcript against known note titles."""

import logging
from typing import Iterable, List

from echo_minutes.domain.models import NoteReference

logger = logging.getLogger(__name__)

MAX_REFERENCES = 10
MIN_TITLE_LENGTH = 3


def find_references(text: str, known_titles: Iterable[str]) -> List[NoteReference]:
    """Return titles that probably appear in the transcript.

    A title matches when any whitespace token of the lowercased transcript
    is a substring of the lowercased title, or the title is a substring of a
    token. The match is loose on purpose so partial names still link.
    Titles shorter than MIN_TITLE_LENGTH never match.

    O(titles x tokens); both are small enough that no index is needed.
    """
    tokens = set(text.lower().split())
    if not tokens:
        return []

    references: List[NoteReference] = []
    seen = set()
    for title in known_titles:
        lowered = title.lower()
        if len(lowered) < MIN_TITLE_LENGTH or title in seen:
            continue
        if any(token in lowered or lowered in token for token in tokens):
            seen.add(title)
            references.append(NoteReference(title))
            if len(references) == MAX_REFERENCES:
                break

    logger.debug(f"Linked {len(references)} notes from {len(tokens)} distinct tokens")
    return references
