"""Local decoding of clip media.

Clip media is usually an MP4 container, which libsndfile may not be
able to read. A failure here is expected and simply means the editor
falls back to the manual selection overlay.
"""

import io
from dataclasses import dataclass
from typing import Optional

import numpy as np
import soundfile as sf


class DecodeError(Exception):
    """Clip media could not be decoded."""


@dataclass
class DecodedAudio:
    """Mono float32 samples of a decoded clip."""

    samples: np.ndarray
    sample_rate: int

    @property
    def duration(self) -> float:
        if self.sample_rate <= 0:
            return 0.0
        return len(self.samples) / self.sample_rate


def probe_duration(payload: bytes) -> Optional[float]:
    """Read the duration from the media header without decoding.

    Returns:
        Duration in seconds, or None if the header is unreadable
    """
    try:
        info = sf.info(io.BytesIO(payload))
    except (RuntimeError, TypeError, ValueError):
        # soundfile raises LibsndfileError (a RuntimeError) for unknown formats
        return None
    if info.samplerate <= 0 or info.frames <= 0:
        return None
    return info.frames / info.samplerate


def decode_audio(payload: bytes) -> DecodedAudio:
    """Decode an audio payload to mono float32 samples.

    Args:
        payload: Raw media bytes

    Returns:
        DecodedAudio with samples normalized to [-1, 1]

    Raises:
        DecodeError: If the payload is empty or cannot be decoded
    """
    if not payload:
        raise DecodeError("Empty media payload")

    try:
        data, sample_rate = sf.read(io.BytesIO(payload), dtype="float32")
    except (RuntimeError, TypeError, ValueError) as e:
        raise DecodeError(f"Audio decode error: {e}") from e

    if data.ndim > 1:
        data = data.mean(axis=1)
    if len(data) == 0:
        raise DecodeError("Decoded audio is empty")

    return DecodedAudio(samples=data.astype(np.float32, copy=False), sample_rate=sample_rate)


def compute_peaks(samples: np.ndarray, count: int) -> np.ndarray:
    """Reduce samples to ``count`` absolute peak values for drawing.

    Args:
        samples: Mono samples
        count: Number of peak buckets

    Returns:
        Array of peaks normalized to [0, 1]
    """
    if count <= 0 or len(samples) == 0:
        return np.zeros(0, dtype=np.float32)

    count = min(count, len(samples))
    usable = len(samples) - (len(samples) % count)
    buckets = np.abs(samples[:usable]).reshape(count, -1)
    peaks = buckets.max(axis=1)

    top = float(peaks.max())
    if top > 0:
        peaks = peaks / top
    return peaks.astype(np.float32)
