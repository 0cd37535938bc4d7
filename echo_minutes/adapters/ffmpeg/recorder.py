"""FFmpegRecorderAdapter — microphone capture through an ffmpeg child process.

Stopping sends SIGTERM so ffmpeg finalizes the container; cancelling does the
same and then discards the partial file.
"""

import os
import logging
import subprocess
from typing import Optional

from echo_minutes.domain.errors import DecodeError
from echo_minutes.ports.recorder import RecorderPort

logger = logging.getLogger(__name__)

# Anything smaller is a header with no audio
MIN_RECORDING_BYTES = 1024


class FFmpegRecorderAdapter(RecorderPort):
    def __init__(
        self,
        device: str = ":0",
        input_format: str = "avfoundation",
        ffmpeg_path: str = "ffmpeg",
    ):
        self._device = device
        self._input_format = input_format
        self._ffmpeg = ffmpeg_path
        self._proc: Optional[subprocess.Popen] = None
        self._output_path: Optional[str] = None

    def start(self, output_path: str) -> None:
        if self._proc is not None:
            raise RuntimeError("Recording already in progress")
        cmd = [
            self._ffmpeg,
            "-nostdin",
            "-y",
            "-f", self._input_format,
            "-i", self._device,
            "-ac", "1",
            "-ar", "16000",
            output_path,
        ]
        logger.info(f"Recording to {output_path} from {self._input_format}:{self._device}")
        self._proc = subprocess.Popen(
            cmd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
        )
        self._output_path = output_path

    def stop(self) -> bytes:
        path = self._release()
        if path is None:
            raise RuntimeError("No recording")
        if not os.path.exists(path) or os.path.getsize(path) < MIN_RECORDING_BYTES:
            if os.path.exists(path):
                os.unlink(path)
            raise DecodeError("Recording failed or produced an empty file")
        with open(path, "rb") as f:
            blob = f.read()
        os.unlink(path)
        logger.info(f"Recording stopped ({len(blob)} bytes)")
        return blob

    def cancel(self) -> None:
        path = self._release()
        if path and os.path.exists(path):
            os.unlink(path)
        logger.info("Recording cancelled, partial audio discarded")

    def _release(self) -> Optional[str]:
        proc, path = self._proc, self._output_path
        self._proc = None
        self._output_path = None
        if proc is not None:
            proc.terminate()
            try:
                proc.wait(timeout=5)
            except subprocess.TimeoutExpired:
                proc.kill()
                proc.wait()
        return path
