"""Meeting note composition.

A template is an ordered list of named sections, each owning a slot for
generated content, rather than a text blob patched by string replacement.
With every list empty the rendered note is exactly the blank template:

    ---
    date: 2026-10-18
    ...
    ---

    # Weekly Sync

    ## Attendees
    Ana, Ben

    ...
    ## Action Items
    - [ ]
    ...
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Sequence

from echo_minutes.domain.models import ActionItem, Decision, MeetingMetadata, NoteReference

logger = logging.getLogger(__name__)

DEFAULT_LANGUAGE = "en"

# Slot names
ATTENDEES = "attendees"
AGENDA = "agenda"
DISCUSSION = "discussion"
ACTION_ITEMS = "action_items"
DECISIONS = "decisions"
FOLLOW_UP = "follow_up"
RELATED_NOTES = "related_notes"


@dataclass(frozen=True)
class Section:
    """A "## heading" block. placeholder is the body left when the slot is empty."""
    slot: str
    heading: str
    placeholder: str = ""


@dataclass(frozen=True)
class MeetingTemplate:
    language: str
    # frontmatter label for date, time, attendees, duration (in that order)
    date_key: str
    time_key: str
    attendees_key: str
    duration_key: str
    sections: tuple
    tags: str = "meeting"


TEMPLATES: Dict[str, MeetingTemplate] = {
    "en": MeetingTemplate(
        language="en",
        date_key="date",
        time_key="time",
        attendees_key="attendees",
        duration_key="duration",
        sections=(
            Section(ATTENDEES, "Attendees"),
            Section(AGENDA, "Agenda"),
            Section(DISCUSSION, "Discussion"),
            Section(ACTION_ITEMS, "Action Items", "- [ ]"),
            Section(DECISIONS, "Decisions Made"),
            Section(FOLLOW_UP, "Follow-up Questions"),
            Section(RELATED_NOTES, "Related Notes"),
        ),
    ),
    "de": MeetingTemplate(
        language="de",
        date_key="datum",
        time_key="zeit",
        attendees_key="teilnehmer",
        duration_key="dauer",
        sections=(
            Section(ATTENDEES, "Teilnehmer"),
            Section(AGENDA, "Tagesordnung"),
            Section(DISCUSSION, "Diskussion"),
            Section(ACTION_ITEMS, "Aktionspunkte", "- [ ]"),
            Section(DECISIONS, "Entscheidungen"),
            Section(FOLLOW_UP, "Offene Fragen"),
            Section(RELATED_NOTES, "Verwandte Notizen"),
        ),
    ),
}


def get_template(language: str) -> MeetingTemplate:
    """Template for a language tag; "auto" and unknown tags fall back to English."""
    return TEMPLATES.get((language or "").lower(), TEMPLATES[DEFAULT_LANGUAGE])


def _render_list(items: Sequence) -> str:
    return "\n".join(item.render() for item in items)


def compose(
    template: MeetingTemplate,
    metadata: MeetingMetadata,
    transcript: str,
    action_items: Sequence[ActionItem] = (),
    decisions: Sequence[Decision] = (),
    links: Sequence[NoteReference] = (),
) -> str:
    """Render a complete note ready to persist verbatim.

    Literal slots (attendees, discussion) take the metadata and transcript
    as-is. List slots take one rendered entry per line; an empty list keeps
    the section's placeholder untouched.
    """
    bodies = {
        ATTENDEES: metadata.attendees,
        DISCUSSION: transcript,
    }
    for slot, items in ((ACTION_ITEMS, action_items), (DECISIONS, decisions), (RELATED_NOTES, links)):
        if items:
            bodies[slot] = _render_list(items)

    frontmatter = "\n".join([
        "---",
        f"{template.date_key}: {metadata.date}",
        f"{template.time_key}: {metadata.time}",
        f"{template.attendees_key}: {metadata.attendees}",
        f"{template.duration_key}: {metadata.duration}",
        f"tags: {template.tags}",
        "---",
    ])

    blocks: List[str] = []
    for section in template.sections:
        body = bodies.get(section.slot, section.placeholder)
        blocks.append(f"## {section.heading}\n{body}\n")

    document = f"{frontmatter}\n\n# {metadata.title}\n\n" + "\n".join(blocks)
    logger.debug(
        f"Composed {template.language} note: {len(action_items)} action items, "
        f"{len(decisions)} decisions, {len(links)} links"
    )
    return document


def note_filename(metadata: MeetingMetadata) -> str:
    return f"{metadata.date} - {metadata.title}.md"
