"""WhisperCppTranscriptionAdapter — drives the whisper.cpp CLI as a subprocess.

The engine is treated as a black box: it gets
``-m <model> [-l <lang>] -f <audio> --output-txt`` and writes its transcript
to a sidecar file ``<audio>.txt``. Only the exit status and that sidecar are
used; stdout/stderr are kept for diagnostics only.

The engine gives no structured progress stream, so progress is reported at
fixed stage milestones rather than parsed from stderr.
"""

import os
import uuid
import shutil
import logging
import tempfile
import warnings
import subprocess
from typing import Optional

from echo_minutes.domain.errors import (
    EmptyTranscriptWarning,
    EngineNotFoundError,
    TranscriptionEngineError,
)
from echo_minutes.domain.models import TranscriptionResult
from echo_minutes.ports.progress import ProgressPort
from echo_minutes.ports.transcription import TranscriptionPort

logger = logging.getLogger(__name__)

DEFAULT_WHISPER_PATH = "/opt/homebrew/opt/whisper-cpp/bin/whisper-cli"

# Engine output can exceed a pipe buffer; captured output is spooled to disk
# and at most this much of it is read back.
MIN_OUTPUT_BYTES = 10 * 1024 * 1024

AUTO_LANGUAGE = "auto"
SIDECAR_SUFFIX = ".txt"

# Stage milestones (fraction of the whole run)
PROGRESS_STARTING = 0.10
PROGRESS_TRANSCRIBING = 0.30
PROGRESS_POST_PROCESSING = 0.70


def model_filename(model_size: str) -> str:
    return f"ggml-{model_size}.bin"


def resolve_model_path(model_dir: str, model_size: str) -> str:
    """Location of a ggml model inside the model directory."""
    return os.path.join(model_dir, model_filename(model_size))


def list_models(model_dir: str) -> list[str]:
    """Model sizes already present in model_dir, sorted."""
    if not os.path.isdir(model_dir):
        return []
    return sorted(
        name[len("ggml-"):-len(".bin")]
        for name in os.listdir(model_dir)
        if name.startswith("ggml-") and name.endswith(".bin")
    )


def sidecar_path(audio_path: str) -> str:
    return audio_path + SIDECAR_SUFFIX


def build_command(executable: str, model_path: str, audio_path: str, language: str = AUTO_LANGUAGE) -> list[str]:
    """Engine command line. The language flag is omitted for "auto"."""
    cmd = [executable, "-m", model_path]
    if language and language != AUTO_LANGUAGE:
        cmd += ["-l", language]
    cmd += ["-f", audio_path, "--output-txt"]
    return cmd


def _resolve_executable(executable: str) -> Optional[str]:
    if not executable:
        return None
    if os.path.isfile(executable) and os.access(executable, os.X_OK):
        return executable
    return shutil.which(executable)


def _read_capped(handle, limit: int, tail: bool = False) -> str:
    handle.seek(0, os.SEEK_END)
    size = handle.tell()
    handle.seek(max(0, size - limit) if tail else 0)
    return handle.read(limit).decode("utf-8", errors="replace")


def _remove(path: str) -> None:
    if os.path.exists(path):
        os.unlink(path)


class WhisperCppTranscriptionAdapter(TranscriptionPort):
    def __init__(
        self,
        executable: str = DEFAULT_WHISPER_PATH,
        progress: Optional[ProgressPort] = None,
        timeout_seconds: Optional[float] = None,
        max_output_bytes: int = MIN_OUTPUT_BYTES,
        keep_audio_on_failure: bool = True,
    ):
        self._executable = executable
        self._progress = progress
        self._timeout = timeout_seconds
        self._max_output_bytes = max(max_output_bytes, MIN_OUTPUT_BYTES)
        self._keep_audio_on_failure = keep_audio_on_failure

    def transcribe(
        self,
        audio_path: str,
        model_path: str,
        language: str = AUTO_LANGUAGE,
        job_id: Optional[str] = None,
    ) -> TranscriptionResult:
        job_id = job_id or uuid.uuid4().hex[:12]
        self._report(job_id, "starting", PROGRESS_STARTING)

        executable = _resolve_executable(self._executable)
        if executable is None:
            raise EngineNotFoundError(
                f"whisper.cpp executable not found: {self._executable!r}. Check WHISPER_PATH."
            )
        if not os.path.isfile(model_path):
            raise EngineNotFoundError(
                f"Model not found at {model_path}. Download it before transcribing."
            )
        if not os.path.isfile(audio_path):
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        txt_path = sidecar_path(audio_path)
        # A crashed earlier run may have left its transcript behind
        _remove(txt_path)

        cmd = build_command(executable, model_path, audio_path, language)
        logger.info(f"Running whisper.cpp: {' '.join(cmd)}")
        self._report(job_id, "transcribing", PROGRESS_TRANSCRIBING)

        with tempfile.TemporaryFile() as out, tempfile.TemporaryFile() as err:
            try:
                proc = subprocess.run(cmd, stdout=out, stderr=err, timeout=self._timeout)
            except subprocess.TimeoutExpired:
                stderr = _read_capped(err, self._max_output_bytes, tail=True)
                self._cleanup_failed(audio_path, txt_path)
                raise TranscriptionEngineError(
                    f"Transcription timed out after {self._timeout}s", stderr=stderr
                )
            except OSError as e:
                self._cleanup_failed(audio_path, txt_path)
                raise TranscriptionEngineError(f"Failed to start whisper.cpp: {e}") from e

            stdout = _read_capped(out, self._max_output_bytes)
            stderr = _read_capped(err, self._max_output_bytes, tail=True)

        logger.debug(f"whisper.cpp stdout: {stdout[-2000:]}")
        if proc.returncode != 0:
            logger.error(f"whisper.cpp exited with {proc.returncode}: {stderr[-1200:]}")
            self._cleanup_failed(audio_path, txt_path)
            raise TranscriptionEngineError(
                f"Transcription failed (exit code {proc.returncode})",
                returncode=proc.returncode,
                stderr=stderr,
            )

        self._report(job_id, "post_processing", PROGRESS_POST_PROCESSING)
        try:
            if os.path.exists(txt_path):
                with open(txt_path, encoding="utf-8", errors="replace") as f:
                    text = f.read().strip()
                logger.info(f"Transcript: {len(text)} characters")
                return TranscriptionResult(text=text, sidecar_found=True, stderr_tail=stderr[-2000:])

            logger.warning(f"Transcript file not found at {txt_path}")
            warnings.warn(f"Transcript file not found: {txt_path}", EmptyTranscriptWarning, stacklevel=2)
            return TranscriptionResult(text="", sidecar_found=False, stderr_tail=stderr[-2000:])
        finally:
            _remove(txt_path)
            _remove(audio_path)

    def model_name(self) -> str:
        return "whisper.cpp"

    def _cleanup_failed(self, audio_path: str, txt_path: str) -> None:
        _remove(txt_path)
        if self._keep_audio_on_failure:
            logger.info(f"Keeping {audio_path} for manual retry")
        else:
            _remove(audio_path)

    def _report(self, job_id: str, stage: str, progress: float) -> None:
        if self._progress is not None:
            self._progress.report(job_id, stage, progress=progress)
