"""Audio playback of the decoded clip.

Playback runs in the sounddevice callback thread; the event loop only
reads the current position, which the playback position adapter turns
into region updates.
"""

from typing import Any, Optional

import numpy as np
import sounddevice as sd

from .decoder import DecodedAudio


class ClipPlayer:
    """Plays a decoded clip and tracks the playback position."""

    def __init__(self, audio: DecodedAudio, output_device: Optional[int] = None):
        """Initialize the player.

        Args:
            audio: Decoded clip audio
            output_device: Output device index, None for the default device
        """
        self.audio = audio
        self.output_device = output_device
        self.stream: Optional[sd.OutputStream] = None
        self.current_frame = 0
        self._stop_requested = False

    @property
    def is_playing(self) -> bool:
        return self.stream is not None and not self._stop_requested

    @property
    def position(self) -> float:
        """Current playback position in seconds."""
        if self.audio.sample_rate <= 0:
            return 0.0
        return self.current_frame / self.audio.sample_rate

    def seek(self, time_seconds: float) -> None:
        """Move the playback position, clamped to the clip."""
        frame = int(max(0.0, time_seconds) * self.audio.sample_rate)
        self.current_frame = min(frame, len(self.audio.samples))

    def play(self) -> None:
        """Start playback from the current position."""
        if self.is_playing:
            return
        if self.current_frame >= len(self.audio.samples):
            self.current_frame = 0
        # A stream that ran to the end is still open
        self._close_stream()

        self._stop_requested = False
        try:
            self.stream = sd.OutputStream(
                samplerate=self.audio.sample_rate,
                device=self.output_device,
                channels=1,
                dtype="float32",
                callback=self._audio_callback,
                finished_callback=self._finished_callback,
            )
        except (sd.PortAudioError, OSError):
            try:
                self.stream = sd.OutputStream(
                    samplerate=self.audio.sample_rate,
                    device=None,
                    channels=1,
                    dtype="float32",
                    callback=self._audio_callback,
                    finished_callback=self._finished_callback,
                )
            except (sd.PortAudioError, OSError) as e:
                print(f"Error opening OutputStream: {e}")
                self.stream = None
                self._stop_requested = True
                return

        try:
            self.stream.start()
        except (sd.PortAudioError, OSError) as e:
            print(f"Error starting audio stream: {e}")
            self._stop_requested = True
            self._close_stream()

    def pause(self) -> None:
        """Stop playback, keeping the position."""
        self._stop_requested = True
        self._close_stream()

    def _close_stream(self) -> None:
        stream = self.stream
        if stream:
            try:
                stream.stop()
                stream.close()
            except (sd.PortAudioError, RuntimeError) as e:
                print(f"Error stopping audio stream: {e}")
            finally:
                self.stream = None

    def play_pause(self) -> None:
        if self.is_playing:
            self.pause()
        else:
            self.play()

    def close(self) -> None:
        """Stop playback and release the stream."""
        self.pause()

    def _audio_callback(
        self,
        outdata: np.ndarray,
        frames: int,
        time_info: Any,
        status: Optional[sd.CallbackFlags],
    ) -> None:
        if status:
            print(f"Playback callback status: {status}")

        if self._stop_requested:
            outdata.fill(0)
            raise sd.CallbackStop()

        samples = self.audio.samples
        remaining = len(samples) - self.current_frame
        if remaining <= 0:
            outdata.fill(0)
            self._stop_requested = True
            raise sd.CallbackStop()

        to_copy = min(frames, remaining)
        outdata[:to_copy, 0] = samples[self.current_frame : self.current_frame + to_copy]
        if to_copy < frames:
            outdata[to_copy:] = 0

        self.current_frame += to_copy

    def _finished_callback(self) -> None:
        self._stop_requested = True
