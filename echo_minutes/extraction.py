"""Pattern-based extraction of action items and decisions from transcripts.

Extraction is deliberately approximate: each fact type has an ordered list
of regex families, and the only false-positive control is a length floor
plus exact-duplicate rejection. Nothing here raises; a transcript without
matches yields an empty list.
"""

import re
import logging
from typing import Iterable, List, Optional

from echo_minutes.domain.models import ActionItem, Decision

logger = logging.getLogger(__name__)

MAX_ACTION_ITEMS = 10
MAX_DECISIONS = 8
MIN_FACT_LENGTH = 10  # trimmed text must be strictly longer than this
MAX_DECISION_LENGTH = 150  # decisions must be strictly shorter than this

# Capture groups stop at sentence terminators and line breaks.
_ACTION_ITEM_PATTERNS = [
    re.compile(r"(?:will|should|need to|must|has to|gonna)\s+([^.!?\n]{10,100})", re.IGNORECASE),
    re.compile(r"action item:?\s*([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"TODO:?\s*([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"\[action\]:?\s*([^.!?\n]+)", re.IGNORECASE),
]

_DECISION_PATTERNS = [
    re.compile(
        r"(?:we|they|team)\s+(?:decided|agreed|concluded)\s+(?:to|that|on)\s+([^.!?\n]{10,149})",
        re.IGNORECASE,
    ),
    re.compile(r"decision:?\s*([^.!?\n]+)", re.IGNORECASE),
    re.compile(r"agreed on:?\s*([^.!?\n]+)", re.IGNORECASE),
]


def _collect(
    text: str,
    patterns: Iterable[re.Pattern],
    limit: int,
    max_length: Optional[int] = None,
) -> List[str]:
    """Run pattern families in order and gather unique trimmed captures.

    Family order wins over document order: every match of the first pattern
    comes before any match of the second.
    """
    found: List[str] = []
    seen = set()
    for pattern in patterns:
        for match in pattern.finditer(text):
            candidate = match.group(1).strip()
            if len(candidate) <= MIN_FACT_LENGTH or candidate in seen:
                continue
            if max_length is not None and len(candidate) >= max_length:
                continue
            seen.add(candidate)
            found.append(candidate)
    if len(found) > limit:
        logger.debug(f"Dropping {len(found) - limit} matches beyond limit of {limit}")
    return found[:limit]


def extract_action_items(text: str) -> List[ActionItem]:
    """Find commitments ("will ...", "need to ...") and explicit action markers.

    Args:
        text: Raw transcript.

    Returns:
        At most MAX_ACTION_ITEMS unique items, in pattern-family order.
    """
    if not text:
        return []
    return [ActionItem(t) for t in _collect(text, _ACTION_ITEM_PATTERNS, MAX_ACTION_ITEMS)]


def extract_decisions(text: str) -> List[Decision]:
    """Find agreed outcomes ("we decided to ...") and explicit decision markers.

    Args:
        text: Raw transcript.

    Returns:
        At most MAX_DECISIONS unique decisions, in pattern-family order.
    """
    if not text:
        return []
    return [Decision(t) for t in _collect(text, _DECISION_PATTERNS, MAX_DECISIONS, MAX_DECISION_LENGTH)]
