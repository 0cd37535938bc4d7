"""Domain -> DTO mappers.

Converts a MeetingNote (domain) to MeetingNoteResponse (Pydantic DTO). Lists
are returned as their rendered Markdown lines.
"""

from echo_minutes.domain.models import MeetingNote
from echo_minutes.models import MeetingNoteResponse


def note_to_dto(note: MeetingNote) -> MeetingNoteResponse:
    """Convert a domain MeetingNote to a MeetingNoteResponse DTO."""
    return MeetingNoteResponse(
        filename=note.filename,
        content=note.content,
        transcript=note.transcript,
        action_items=[item.render() for item in note.action_items],
        decisions=[decision.render() for decision in note.decisions],
        related_notes=[ref.render() for ref in note.references],
        warnings=list(note.warnings),
        path=note.path,
        model=note.model,
    )
