from typing import List, Optional
from pydantic import BaseModel


class MeetingNoteResponse(BaseModel):
    """Response format for a composed meeting note"""
    filename: str
    content: str
    transcript: str
    action_items: List[str] = []
    decisions: List[str] = []
    related_notes: List[str] = []
    warnings: List[str] = []
    path: Optional[str] = None
    model: Optional[str] = None


class ModelInfo(BaseModel):
    id: str
    object: str = "model"
    path: str
    owned_by: str = "whisper.cpp"


class ModelList(BaseModel):
    object: str = "list"
    data: List[ModelInfo]


class HealthResponse(BaseModel):
    status: str = "ok"
    session: str
    engine: str
    model_available: bool
