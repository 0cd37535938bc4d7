"""MeetingNotesUseCase — orchestrates audio -> transcript -> meeting note.

Accepts all ports via dependency injection. Stage transitions go through a
MeetingSession so only one run is ever in flight, and progress goes to a
single ProgressPort sink.
"""

import os
import uuid
import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from echo_minutes.audio_encoding import encode, write_wav
from echo_minutes.composition import compose, get_template, note_filename
from echo_minutes.domain.models import MeetingMetadata, MeetingNote
from echo_minutes.domain.session import MeetingSession, SessionState
from echo_minutes.extraction import extract_action_items, extract_decisions
from echo_minutes.linking import find_references
from echo_minutes.ports.audio import AudioDecodingPort
from echo_minutes.ports.note_index import NoteIndexPort
from echo_minutes.ports.note_store import NoteStorePort
from echo_minutes.ports.progress import FAILED_STAGE, ProgressPort
from echo_minutes.ports.recorder import RecorderPort
from echo_minutes.ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

PCM_FILENAME = "meeting.wav"
CAPTURE_BASENAME = "meeting"


@dataclass
class MeetingRequest:
    """All parameters for one meeting run."""
    audio: bytes
    title: str
    attendees: str = ""
    language: str = "auto"
    suffix: str = ".webm"
    recorded_at: Optional[datetime] = None
    duration_seconds: Optional[float] = None
    extract_action_items: bool = True
    detect_decisions: bool = True
    link_notes: bool = True
    save: bool = False


class MeetingNotesUseCase:
    def __init__(
        self,
        audio: AudioDecodingPort,
        transcription: TranscriptionPort,
        progress: ProgressPort,
        model_path: str,
        temp_dir: str,
        note_index: Optional[NoteIndexPort] = None,
        note_store: Optional[NoteStorePort] = None,
        recorder: Optional[RecorderPort] = None,
        session: Optional[MeetingSession] = None,
    ):
        self._audio = audio
        self._transcription = transcription
        self._progress = progress
        self._model_path = model_path
        self._temp_dir = temp_dir
        os.makedirs(temp_dir, exist_ok=True)
        self._note_index = note_index
        self._note_store = note_store
        self._recorder = recorder
        self.session = session or MeetingSession()
        self._recording_started: Optional[datetime] = None

    # Recording

    def start_recording(self, suffix: str = ".wav") -> str:
        """Begin microphone capture. Returns the capture path."""
        if self._recorder is None:
            raise RuntimeError("No recorder configured")
        self.session.begin(SessionState.RECORDING)
        capture_path = os.path.join(self._temp_dir, CAPTURE_BASENAME + suffix)
        try:
            self._recorder.start(capture_path)
        except Exception:
            self.session.fail()
            raise
        self._recording_started = datetime.now()
        return capture_path

    def cancel_recording(self) -> None:
        """Release the microphone and discard partial audio."""
        if self.session.state != SessionState.RECORDING:
            return
        self._recorder.cancel()
        self._recording_started = None
        self.session.transition(SessionState.IDLE)

    def stop_recording(self, title: str, attendees: str = "", language: str = "auto",
                       suffix: str = ".wav", **flags) -> MeetingNote:
        """Stop capture and run the pipeline on the recorded audio."""
        if self.session.state != SessionState.RECORDING:
            raise RuntimeError("No recording in progress")
        if not title.strip():
            raise ValueError("Meeting title is required")
        started = self._recording_started or datetime.now()
        self._recording_started = None
        try:
            blob = self._recorder.stop()
        except Exception:
            self.session.fail()
            raise
        req = MeetingRequest(
            audio=blob,
            title=title,
            attendees=attendees,
            language=language,
            suffix=suffix,
            recorded_at=datetime.now(),
            duration_seconds=(datetime.now() - started).total_seconds(),
            **flags,
        )
        self.session.transition(SessionState.CONVERTING)
        return self._process(req)

    # Pipeline

    def execute(self, req: MeetingRequest) -> MeetingNote:
        """Run the full pipeline. Fatal errors propagate after the session is reset."""
        if not req.title.strip():
            raise ValueError("Meeting title is required")

        self.session.begin(SessionState.CONVERTING)
        return self._process(req)

    def _process(self, req: MeetingRequest) -> MeetingNote:
        job_id = uuid.uuid4().hex[:12]
        try:
            note = self._run(job_id, req)
        except Exception as e:
            logger.error(f"[{job_id}] Meeting pipeline failed: {e}")
            self._progress.report(job_id, FAILED_STAGE, detail=type(e).__name__)
            self.session.fail()
            raise

        self.session.transition(SessionState.DONE)
        self._progress.report(job_id, "done", progress=1.0, detail=note.filename)
        return note

    def _run(self, job_id: str, req: MeetingRequest) -> MeetingNote:
        # 1. Decode + encode to 16kHz mono PCM16
        self._progress.report(job_id, "converting", progress=0.05)
        samples = self._audio.decode(req.audio, req.suffix)
        wav_path = write_wav(encode(samples), os.path.join(self._temp_dir, PCM_FILENAME))

        # 2. External engine (deletes wav + sidecar once read)
        self.session.transition(SessionState.TRANSCRIBING)
        result = self._transcription.transcribe(
            wav_path, self._model_path, language=req.language, job_id=job_id,
        )
        warnings: list[str] = []
        if not result.sidecar_found:
            warnings.append("Transcript file not found; the discussion section is empty")

        # 3. Extraction + linking (read-only on the same transcript)
        self.session.transition(SessionState.COMPOSING)
        self._progress.report(job_id, "composing", progress=0.9)
        text = result.text
        action_items = extract_action_items(text) if req.extract_action_items else []
        decisions = extract_decisions(text) if req.detect_decisions else []
        references = []
        if req.link_notes and self._note_index is not None:
            references = find_references(text, self._note_index.titles())

        # 4. Compose
        metadata = MeetingMetadata(
            title=req.title.strip(),
            attendees=req.attendees.strip(),
            recorded_at=req.recorded_at or datetime.now(),
            duration_seconds=(
                req.duration_seconds if req.duration_seconds is not None else samples.duration_seconds
            ),
        )
        content = compose(
            get_template(req.language), metadata, text,
            action_items=action_items, decisions=decisions, links=references,
        )
        note = MeetingNote(
            filename=note_filename(metadata),
            content=content,
            transcript=text,
            action_items=action_items,
            decisions=decisions,
            references=references,
            warnings=warnings,
            model=self._transcription.model_name(),
        )

        # 5. Persist (optional)
        if req.save:
            if self._note_store is None:
                raise RuntimeError("No note store configured")
            note.path = self._note_store.save(note.filename, note.content)

        logger.info(
            f"[{job_id}] Note ready: {len(action_items)} action items, "
            f"{len(decisions)} decisions, {len(references)} links"
        )
        return note
