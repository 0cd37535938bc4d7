"""HTTP surface: upload a recording, get the composed meeting note back."""

import os
import logging
from typing import Optional

from fastapi import FastAPI, File, Form, HTTPException, UploadFile
from fastapi.concurrency import run_in_threadpool

from echo_minutes import __version__
from echo_minutes.adapters.whisper_cpp.transcription import list_models, resolve_model_path
from echo_minutes.config import Config, create_use_case, get_config
from echo_minutes.domain.errors import (
    DecodeError,
    EngineNotFoundError,
    SessionBusyError,
    TranscriptionEngineError,
)
from echo_minutes.mappers import note_to_dto
from echo_minutes.models import HealthResponse, MeetingNoteResponse, ModelInfo, ModelList
from echo_minutes.use_cases.meeting_notes import MeetingNotesUseCase, MeetingRequest

logger = logging.getLogger(__name__)


def create_app(use_case: Optional[MeetingNotesUseCase] = None, cfg: Optional[Config] = None) -> FastAPI:
    cfg = cfg or get_config()
    use_case = use_case or create_use_case(cfg)

    app = FastAPI(title="echo-minutes", version=__version__)
    app.state.use_case = use_case
    app.state.config = cfg

    @app.get("/health", response_model=HealthResponse)
    def health():
        return HealthResponse(
            session=use_case.session.state.value,
            engine=cfg.whisper_path,
            model_available=os.path.isfile(cfg.model_path),
        )

    @app.get("/v1/models", response_model=ModelList)
    def models():
        return ModelList(data=[
            ModelInfo(id=size, path=resolve_model_path(cfg.model_dir, size))
            for size in list_models(cfg.model_dir)
        ])

    @app.post("/v1/meetings/notes", response_model=MeetingNoteResponse)
    async def create_meeting_note(
        file: UploadFile = File(...),
        title: str = Form(...),
        attendees: Optional[str] = Form(None),
        language: Optional[str] = Form(None),
        duration_seconds: Optional[float] = Form(None),
        save: bool = Form(False),
    ):
        if use_case.session.busy:
            raise HTTPException(status_code=409, detail="A meeting is already being processed")

        blob = await file.read()
        suffix = os.path.splitext(file.filename or "")[1] or ".webm"
        req = MeetingRequest(
            audio=blob,
            title=title,
            attendees=attendees if attendees is not None else cfg.attendees_default,
            language=language or cfg.language,
            suffix=suffix,
            duration_seconds=duration_seconds,
            extract_action_items=cfg.auto_extract_action_items,
            detect_decisions=cfg.auto_detect_decisions,
            link_notes=cfg.auto_link_notes,
            save=save,
        )
        logger.info(f"Meeting note request: {title!r}, {len(blob)} bytes ({suffix})")

        try:
            note = await run_in_threadpool(use_case.execute, req)
        except SessionBusyError as e:
            raise HTTPException(status_code=409, detail=str(e))
        except ValueError as e:
            raise HTTPException(status_code=400, detail=str(e))
        except DecodeError as e:
            raise HTTPException(status_code=422, detail=str(e))
        except EngineNotFoundError as e:
            raise HTTPException(status_code=503, detail=str(e))
        except TranscriptionEngineError as e:
            raise HTTPException(status_code=502, detail=str(e))
        except FileExistsError as e:
            raise HTTPException(status_code=409, detail=str(e))

        return note_to_dto(note)

    return app
