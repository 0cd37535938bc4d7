"""Audio encoding for the transcription engine.

Turns decoded samples into the only format whisper.cpp accepts: a RIFF/WAVE
file with 16kHz mono 16-bit little-endian PCM and a canonical 44-byte header.
All functions here are pure; writing to disk is a separate step.
"""

import io
import wave
import logging

import numpy as np

from echo_minutes.domain.models import AudioSamples

logger = logging.getLogger(__name__)

TARGET_SAMPLE_RATE = 16000
SAMPLE_WIDTH = 2  # bytes, 16-bit


def downmix(data: np.ndarray) -> np.ndarray:
    """Reduce samples to a single channel.

    Stereo is averaged as (L + R) / 2. For more than two channels only
    channels 0 and 1 are averaged and the rest are ignored.
    """
    if data.ndim == 1:
        return data.astype(np.float32, copy=False)
    if data.shape[1] == 1:
        return data[:, 0].astype(np.float32, copy=False)
    if data.shape[1] > 2:
        logger.debug(f"Ignoring {data.shape[1] - 2} channels beyond the first two")
    left = data[:, 0].astype(np.float32)
    right = data[:, 1].astype(np.float32)
    return (left + right) / 2


def resampled_length(input_length: int, source_rate: int, target_rate: int = TARGET_SAMPLE_RATE) -> int:
    """Output length: input_length / (source/target), rounded half up."""
    if source_rate == target_rate:
        return input_length
    ratio = source_rate / target_rate
    return int(np.floor(input_length / ratio + 0.5))


def resample_linear(samples: np.ndarray, source_rate: int, target_rate: int = TARGET_SAMPLE_RATE) -> np.ndarray:
    """Linear-interpolation resampler.

    Output sample i sits at source coordinate i * (source_rate / target_rate)
    and is interpolated between its floor and ceil neighbours. Equal rates
    return an identity copy.

    Args:
        samples: Mono float samples.
        source_rate: Sample rate of ``samples`` in Hz.
        target_rate: Desired output rate in Hz.

    Returns:
        Resampled float32 array of length ``resampled_length(...)``.
    """
    if source_rate <= 0 or target_rate <= 0:
        raise ValueError(f"Sample rates must be positive, got {source_rate} -> {target_rate}")

    samples = np.asarray(samples, dtype=np.float32)
    if source_rate == target_rate:
        return samples.copy()

    new_length = resampled_length(len(samples), source_rate, target_rate)
    if new_length == 0 or len(samples) == 0:
        return np.zeros(0, dtype=np.float32)

    ratio = source_rate / target_rate
    positions = np.arange(new_length, dtype=np.float64) * ratio
    index_floor = np.minimum(np.floor(positions).astype(np.int64), len(samples) - 1)
    index_ceil = np.minimum(index_floor + 1, len(samples) - 1)
    frac = positions - index_floor

    low = samples[index_floor].astype(np.float64)
    high = samples[index_ceil].astype(np.float64)
    return (low * (1.0 - frac) + high * frac).astype(np.float32)


def quantize_pcm16(samples: np.ndarray) -> np.ndarray:
    """Clamp to [-1, 1] and scale to int16.

    Negative values scale by 32768 and non-negative ones by 32767, truncating
    toward zero.
    """
    clamped = np.clip(np.asarray(samples, dtype=np.float64), -1.0, 1.0)
    scaled = np.where(clamped < 0, clamped * 32768.0, clamped * 32767.0)
    return np.trunc(scaled).astype("<i2")


def encode_wav(pcm: np.ndarray, sample_rate: int = TARGET_SAMPLE_RATE) -> bytes:
    """Serialize int16 mono samples into a RIFF/WAVE byte string."""
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(1)
        wf.setsampwidth(SAMPLE_WIDTH)
        wf.setframerate(sample_rate)
        wf.writeframes(np.asarray(pcm, dtype="<i2").tobytes())
    return buffer.getvalue()


def encode(samples: AudioSamples) -> bytes:
    """Downmix, resample to 16kHz, quantize and wrap in a WAV container."""
    mono = downmix(samples.data)
    resampled = resample_linear(mono, samples.sample_rate, TARGET_SAMPLE_RATE)
    pcm = quantize_pcm16(resampled)
    logger.info(
        f"Encoded {samples.frames} frames @ {samples.sample_rate}Hz x{samples.channels} "
        f"-> {len(pcm)} samples @ {TARGET_SAMPLE_RATE}Hz mono"
    )
    return encode_wav(pcm, TARGET_SAMPLE_RATE)


def write_wav(wav_bytes: bytes, path: str) -> str:
    """Write an encoded buffer to disk, overwriting any previous run's file."""
    with open(path, "wb") as f:
        f.write(wav_bytes)
        f.flush()
    return path
