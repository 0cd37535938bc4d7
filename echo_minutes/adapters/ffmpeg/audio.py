"""FFmpegAudioAdapter — decodes any container ffmpeg understands (webm, m4a, ...).

ffmpeg only unpacks the codec into float WAV at the source rate and channel
layout; resampling and downmixing are left to audio_encoding so the output
is the same whichever decoder is configured.
"""

import os
import logging
import tempfile
import subprocess

import soundfile

from echo_minutes.domain.errors import DecodeError
from echo_minutes.domain.models import AudioSamples
from echo_minutes.ports.audio import AudioDecodingPort

logger = logging.getLogger(__name__)


class FFmpegAudioAdapter(AudioDecodingPort):
    def __init__(self, ffmpeg_path: str = "ffmpeg"):
        self._ffmpeg = ffmpeg_path

    def decode(self, blob: bytes, suffix: str = ".webm") -> AudioSamples:
        if not blob:
            raise DecodeError("Audio blob is empty")

        src = tempfile.NamedTemporaryFile(suffix=suffix, delete=False)
        src.write(blob)
        src.close()
        dst = tempfile.NamedTemporaryFile(suffix=".wav", delete=False)
        dst.close()

        try:
            cmd = [
                self._ffmpeg, "-y",
                "-i", src.name,
                "-c:a", "pcm_f32le",
                dst.name,
            ]
            try:
                result = subprocess.run(cmd, capture_output=True, text=True)
            except FileNotFoundError:
                raise DecodeError(f"ffmpeg not found at {self._ffmpeg!r}. Install it to decode {suffix} audio.")
            if result.returncode != 0:
                logger.error(f"Error decoding audio: {result.stderr[-1200:]}")
                raise DecodeError(f"Failed to decode audio: {result.stderr[-1200:]}")

            try:
                data, sample_rate = soundfile.read(dst.name, dtype="float32")
            except soundfile.LibsndfileError as e:
                raise DecodeError(f"Failed to read decoded audio: {e}") from e

            logger.info(f"Decoded {len(blob)} bytes of {suffix} -> {len(data)} frames @ {sample_rate}Hz")
            return AudioSamples(data=data, sample_rate=sample_rate)

        finally:
            for path in (src.name, dst.name):
                if os.path.exists(path):
                    os.unlink(path)
