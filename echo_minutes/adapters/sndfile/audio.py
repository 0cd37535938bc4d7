"""SoundfileAudioAdapter — decodes WAV/FLAC/OGG blobs without a subprocess."""

import io
import logging

import soundfile

from echo_minutes.domain.errors import DecodeError
from echo_minutes.domain.models import AudioSamples
from echo_minutes.ports.audio import AudioDecodingPort

logger = logging.getLogger(__name__)


class SoundfileAudioAdapter(AudioDecodingPort):
    def decode(self, blob: bytes, suffix: str = ".wav") -> AudioSamples:
        if not blob:
            raise DecodeError("Audio blob is empty")
        try:
            data, sample_rate = soundfile.read(io.BytesIO(blob), dtype="float32")
        except (soundfile.LibsndfileError, TypeError, RuntimeError) as e:
            raise DecodeError(f"Failed to decode {suffix} audio: {e}") from e

        logger.info(f"Decoded {len(blob)} bytes -> {len(data)} frames @ {sample_rate}Hz")
        return AudioSamples(data=data, sample_rate=sample_rate)
