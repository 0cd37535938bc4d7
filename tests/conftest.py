"""Pytest configuration helpers and shared fakes."""

from __future__ import annotations

import io
import os
import stat
import sys
from pathlib import Path
from typing import Optional

import numpy as np
import pytest
import soundfile as sf


def _ensure_repo_on_path() -> None:
    """Allow tests to import the package without installing it."""
    repo_root = Path(__file__).resolve().parents[1]
    path_str = str(repo_root)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)


_ensure_repo_on_path()

from echo_minutes.ports.progress import ProgressPort  # noqa: E402


class RecordingProgress(ProgressPort):
    """Collects stage reports instead of logging them."""

    def __init__(self) -> None:
        self.events: list[tuple[str, str, float, Optional[str]]] = []

    def report(self, job_id, stage, progress=0.0, detail=None) -> None:
        self.events.append((job_id, stage, progress, detail))

    @property
    def stages(self) -> list[str]:
        return [stage for _, stage, _, _ in self.events]


def sine_wave(duration_s: float, sample_rate: int, channels: int = 1, freq: float = 220.0) -> np.ndarray:
    t = np.arange(int(duration_s * sample_rate)) / sample_rate
    mono = (0.5 * np.sin(2 * np.pi * freq * t)).astype(np.float32)
    if channels == 1:
        return mono
    return np.stack([mono] * channels, axis=1)


def wav_blob(data: np.ndarray, sample_rate: int) -> bytes:
    buffer = io.BytesIO()
    sf.write(buffer, data, sample_rate, format="WAV", subtype="PCM_16")
    return buffer.getvalue()


def make_engine(
    directory: Path,
    transcript: Optional[str] = "",
    exit_code: int = 0,
    sleep: float = 0,
    stdout_bytes: int = 0,
) -> dict:
    """Write a fake whisper-cli shell script.

    The script logs its arguments, copies the input WAV aside, optionally
    writes ``<audio>.txt`` and exits with ``exit_code``. transcript=None
    means no sidecar is written.
    """
    script = directory / "fake-whisper-cli"
    args_log = directory / "args.log"
    captured = directory / "captured.wav"
    lines = [
        "#!/bin/sh",
        f'echo "$@" > "{args_log}"',
        'audio=""',
        'while [ $# -gt 0 ]; do',
        '  case "$1" in',
        '    -f) audio="$2"; shift 2;;',
        '    *) shift;;',
        '  esac',
        'done',
        f'cp "$audio" "{captured}"',
    ]
    if sleep:
        lines.append(f"sleep {sleep}")
    if stdout_bytes:
        lines.append(f"head -c {stdout_bytes} /dev/zero | tr '\\0' 'x'")
    if transcript is not None:
        lines += [
            'cat > "$audio.txt" <<\'EOT\'',
            transcript,
            "EOT",
        ]
    lines.append(f"exit {exit_code}")
    script.write_text("\n".join(lines) + "\n")
    script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
    return {"path": str(script), "args_log": args_log, "captured": captured}


@pytest.fixture()
def progress() -> RecordingProgress:
    return RecordingProgress()


@pytest.fixture()
def model_file(tmp_path) -> str:
    models = tmp_path / "models"
    models.mkdir()
    path = models / "ggml-base.bin"
    path.write_bytes(b"ggml")
    return str(path)


@pytest.fixture()
def audio_file(tmp_path) -> str:
    path = tmp_path / "work" / "meeting.wav"
    path.parent.mkdir()
    path.write_bytes(wav_blob(sine_wave(0.1, 16000), 16000))
    return str(path)


requires_posix_shell = pytest.mark.skipif(
    os.name != "posix", reason="fake engine is a POSIX shell script"
)
