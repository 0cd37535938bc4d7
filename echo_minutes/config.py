import os
import logging
from typing import Dict, Optional, Any
from pathlib import Path

from dotenv import load_dotenv

logger = logging.getLogger(__name__)

load_dotenv()

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8001
DEFAULT_WHISPER_PATH = "/opt/homebrew/opt/whisper-cpp/bin/whisper-cli"
DEFAULT_MODEL_SIZE = "base"
DEFAULT_NOTES_FOLDER = "Meetings"
DEFAULT_MAX_OUTPUT_BYTES = 10 * 1024 * 1024


def _flag(name: str, default: str = "true") -> bool:
    return os.environ.get(name, default).lower() in {"1", "true", "yes"}


class Config:
    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super(Config, cls).__new__(cls)
            cls._instance._initialize()
        return cls._instance

    def _initialize(self):
        self.host = os.environ.get("HOST", DEFAULT_HOST)
        self.port = int(os.environ.get("PORT", DEFAULT_PORT))
        self.debug = os.environ.get("DEBUG", "0") == "1"

        # Transcription engine
        self.whisper_path = os.environ.get("WHISPER_PATH", DEFAULT_WHISPER_PATH)
        self.model_dir = os.environ.get("MODEL_DIR", str(Path.home() / ".cache" / "echo-minutes" / "models"))
        self.model_size = os.environ.get("MODEL_SIZE", DEFAULT_MODEL_SIZE)
        self.language = os.environ.get("LANGUAGE", "auto")
        timeout = os.environ.get("TRANSCRIBE_TIMEOUT", "").strip()
        self.transcribe_timeout: Optional[float] = float(timeout) if timeout else None
        self.max_output_bytes = int(os.environ.get("MAX_OUTPUT_BYTES", DEFAULT_MAX_OUTPUT_BYTES))
        self.keep_audio_on_failure = _flag("KEEP_AUDIO_ON_FAILURE")

        # Audio
        self.audio_decoder = os.environ.get("AUDIO_DECODER", "ffmpeg").lower()
        self.record_input_format = os.environ.get("RECORD_INPUT_FORMAT", "avfoundation")
        self.record_device = os.environ.get("RECORD_DEVICE", ":0")
        self.temp_dir = os.environ.get("TEMP_DIR", "/tmp/echo-minutes")

        # Notes
        self.vault_dir = os.environ.get("VAULT_DIR", str(Path.cwd()))
        self.meeting_notes_folder = os.environ.get("MEETING_NOTES_FOLDER", DEFAULT_NOTES_FOLDER)
        self.attendees_default = os.environ.get("ATTENDEES_DEFAULT", "")
        self.auto_extract_action_items = _flag("AUTO_EXTRACT_ACTION_ITEMS")
        self.auto_detect_decisions = _flag("AUTO_DETECT_DECISIONS")
        self.auto_link_notes = _flag("AUTO_LINK_NOTES")

        Path(self.temp_dir).mkdir(parents=True, exist_ok=True)

    @property
    def model_path(self) -> str:
        from echo_minutes.adapters.whisper_cpp.transcription import resolve_model_path
        return resolve_model_path(self.model_dir, self.model_size)

    def as_dict(self) -> Dict[str, Any]:
        return {
            "host": self.host,
            "port": self.port,
            "debug": self.debug,
            "whisper_path": self.whisper_path,
            "model_dir": self.model_dir,
            "model_size": self.model_size,
            "language": self.language,
            "transcribe_timeout": self.transcribe_timeout,
            "audio_decoder": self.audio_decoder,
            "vault_dir": self.vault_dir,
            "meeting_notes_folder": self.meeting_notes_folder,
            "auto_extract_action_items": self.auto_extract_action_items,
            "auto_detect_decisions": self.auto_detect_decisions,
            "auto_link_notes": self.auto_link_notes,
            "keep_audio_on_failure": self.keep_audio_on_failure,
        }


def get_config() -> Config:
    return Config()


def create_transcription_adapter(cfg: Config, progress):
    """Create the transcription adapter (whisper.cpp CLI)."""
    from echo_minutes.adapters.whisper_cpp.transcription import WhisperCppTranscriptionAdapter
    transcription = WhisperCppTranscriptionAdapter(
        executable=cfg.whisper_path,
        progress=progress,
        timeout_seconds=cfg.transcribe_timeout,
        max_output_bytes=cfg.max_output_bytes,
        keep_audio_on_failure=cfg.keep_audio_on_failure,
    )
    logger.info(f"Transcription adapter: {type(transcription).__name__} ({cfg.whisper_path})")
    return transcription


def create_audio_adapter(cfg: Config):
    """Create the audio decoding adapter based on AUDIO_DECODER env var.

    Uses lazy imports so the unused decoder is never loaded.
    """
    decoder = cfg.audio_decoder
    if decoder == "ffmpeg":
        from echo_minutes.adapters.ffmpeg.audio import FFmpegAudioAdapter
        return FFmpegAudioAdapter()
    elif decoder == "soundfile":
        from echo_minutes.adapters.sndfile.audio import SoundfileAudioAdapter
        return SoundfileAudioAdapter()
    raise ValueError(f"Unknown AUDIO_DECODER: {decoder!r}. Valid options: ffmpeg, soundfile")


def create_infra_adapters(cfg: Config):
    """Create local infrastructure adapters (progress, vault index, note store, recorder)."""
    from echo_minutes.adapters.local.log_progress import LogProgressAdapter
    from echo_minutes.adapters.local.vault_index import VaultNoteIndex
    from echo_minutes.adapters.local.markdown_store import MarkdownNoteStore
    from echo_minutes.adapters.ffmpeg.recorder import FFmpegRecorderAdapter

    adapters = {
        "progress": LogProgressAdapter(),
        "note_index": VaultNoteIndex(cfg.vault_dir),
        "note_store": MarkdownNoteStore(cfg.vault_dir, cfg.meeting_notes_folder),
        "recorder": FFmpegRecorderAdapter(cfg.record_device, cfg.record_input_format),
    }
    logger.info(f"Infra adapters: {', '.join(type(v).__name__ for v in adapters.values())}")
    return adapters


def create_use_case(cfg: Config):
    """Wire a MeetingNotesUseCase from configuration."""
    from echo_minutes.use_cases.meeting_notes import MeetingNotesUseCase

    infra = create_infra_adapters(cfg)
    return MeetingNotesUseCase(
        audio=create_audio_adapter(cfg),
        transcription=create_transcription_adapter(cfg, infra["progress"]),
        progress=infra["progress"],
        model_path=cfg.model_path,
        temp_dir=cfg.temp_dir,
        note_index=infra["note_index"],
        note_store=infra["note_store"],
        recorder=infra["recorder"],
    )
