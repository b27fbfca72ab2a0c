"""Clip audio: decoding, playback and the waveform collaborator."""

from .decode_attempt import DecodeAttempt, DecodeTimeout
from .decoder import DecodedAudio, DecodeError, decode_audio, probe_duration
from .waveform import Waveform, WaveformRegion

__all__ = [
    "DecodeAttempt",
    "DecodeError",
    "DecodeTimeout",
    "DecodedAudio",
    "Waveform",
    "WaveformRegion",
    "decode_audio",
    "probe_duration",
]
