"""Waveform with draggable regions.

This module provides the waveform collaborator of the editor: it holds
the decoded clip, its drawable peaks and the region objects, plays the
audio, and reports what happens through named events:

- ``ready`` (duration)
- ``loading`` (percent)
- ``region-created`` (region)
- ``region-updated`` (region)
- ``error`` (exception)

Programmatic changes never emit ``region-*`` events; only user gestures
(forwarded by the waveform view) do.
"""

from typing import Any, Callable, Dict, List, Optional

import numpy as np

from ..constants import UIConstants
from .decoder import DecodedAudio, compute_peaks

EVENTS = ("ready", "loading", "region-created", "region-updated", "error")


class WaveformRegion:
    """A region drawn on the waveform."""

    def __init__(self, waveform: "Waveform", start: float, end: float):
        self._waveform = waveform
        self.start = start
        self.end = end

    def remove(self) -> None:
        """Remove this region from its waveform."""
        self._waveform._discard_region(self)

    def __repr__(self) -> str:
        return f"WaveformRegion(start={self.start:.3f}, end={self.end:.3f})"


class Waveform:
    """Decoded clip audio with regions and playback."""

    def __init__(self, player_factory: Optional[Callable[[DecodedAudio], Any]] = None):
        """Initialize an empty waveform.

        Args:
            player_factory: Creates the player for decoded audio,
                defaults to ClipPlayer
        """
        self._player_factory = player_factory
        self._handlers: Dict[str, List[Callable]] = {name: [] for name in EVENTS}
        self._regions: List[WaveformRegion] = []
        self.audio: Optional[DecodedAudio] = None
        self.player = None
        self.peaks = np.zeros(0, dtype=np.float32)
        self.is_ready = False
        self.is_destroyed = False

    # --- Events ---

    def on(self, event: str, handler: Callable) -> None:
        """Subscribe ``handler`` to ``event``."""
        if event not in self._handlers:
            raise ValueError(f"Unknown waveform event: {event}")
        self._handlers[event].append(handler)

    def off(self, event: str, handler: Callable) -> None:
        if handler in self._handlers.get(event, []):
            self._handlers[event].remove(handler)

    def _emit(self, event: str, *args) -> None:
        if self.is_destroyed:
            return
        for handler in list(self._handlers[event]):
            handler(*args)

    # --- Loading ---

    def load(self, audio: DecodedAudio) -> None:
        """Attach decoded audio and announce readiness.

        Emits ``loading`` as the peaks and the player are prepared, then
        ``ready`` with the clip duration. Emits ``error`` instead if the
        audio is unusable or no player can be created.
        """
        if self.is_destroyed:
            return

        self._emit("loading", 0)
        if audio.duration <= 0:
            self._emit("error", ValueError("Decoded audio has no duration"))
            return

        self.audio = audio
        self.peaks = compute_peaks(audio.samples, UIConstants.WAVEFORM_PEAK_COUNT)
        self._emit("loading", 50)

        try:
            self.player = self._create_player(audio)
        except (OSError, ImportError) as e:
            # PortAudio missing or unusable
            self._emit("error", e)
            return
        self.is_ready = True
        self._emit("loading", 100)
        self._emit("ready", audio.duration)

    def _create_player(self, audio: DecodedAudio):
        if self._player_factory is not None:
            return self._player_factory(audio)
        # sounddevice needs PortAudio, load it only once audio is playable
        from .player import ClipPlayer

        return ClipPlayer(audio)

    def get_duration(self) -> float:
        return self.audio.duration if self.audio is not None else 0.0

    # --- Regions ---

    @property
    def regions(self) -> List[WaveformRegion]:
        return list(self._regions)

    def add_region(self, start: float, end: float) -> WaveformRegion:
        """Add a region without emitting events."""
        region = WaveformRegion(self, start, end)
        self._regions.append(region)
        return region

    def clear_regions(self) -> None:
        self._regions.clear()

    def _discard_region(self, region: WaveformRegion) -> None:
        if region in self._regions:
            self._regions.remove(region)

    def update_region(self, start: float, end: float) -> None:
        """Show ``[start, end]`` as the single region, without events."""
        if self._regions:
            region = self._regions[-1]
            region.start, region.end = start, end
            for other in self._regions[:-1]:
                self._discard_region(other)
        else:
            self.add_region(start, end)

    def show_region(self, start: float, end: float) -> None:
        """Region surface hook for the sync broadcaster."""
        self.update_region(start, end)

    # --- User gestures (called by the waveform view) ---

    def create_region_from_drag(self, start: float, end: float) -> WaveformRegion:
        """A drag selection produced a new region."""
        start, end = self._order_and_clamp(start, end)
        region = WaveformRegion(self, start, end)
        self._regions.append(region)
        self._emit("region-created", region)
        return region

    def resize_region(self, region: WaveformRegion, start: float, end: float) -> None:
        """An edge of ``region`` was dragged."""
        region.start, region.end = self._order_and_clamp(start, end)
        self._emit("region-updated", region)

    def move_region(self, region: WaveformRegion, delta: float) -> None:
        """``region`` was dragged as a whole by ``delta`` seconds."""
        length = region.end - region.start
        duration = self.get_duration()
        start = max(0.0, region.start + delta)
        if duration > 0:
            start = min(start, duration - length)
        region.start, region.end = start, start + length
        self._emit("region-updated", region)

    def region_at(self, time_seconds: float) -> Optional[WaveformRegion]:
        for region in reversed(self._regions):
            if region.start <= time_seconds <= region.end:
                return region
        return None

    def _order_and_clamp(self, start: float, end: float):
        if start > end:
            start, end = end, start
        duration = self.get_duration()
        start = max(0.0, start)
        if duration > 0:
            end = min(end, duration)
        return start, end

    # --- Playback ---

    def play_pause(self) -> None:
        if self.player is not None:
            self.player.play_pause()

    @property
    def is_playing(self) -> bool:
        return self.player is not None and self.player.is_playing

    @property
    def position(self) -> float:
        return self.player.position if self.player is not None else 0.0

    def seek(self, time_seconds: float) -> None:
        if self.player is not None:
            self.player.seek(time_seconds)

    # --- Teardown ---

    def destroy(self) -> None:
        """Stop playback and drop all handlers and regions."""
        if self.is_destroyed:
            return
        if self.player is not None:
            self.player.close()
            self.player = None
        self._regions.clear()
        for handlers in self._handlers.values():
            handlers.clear()
        self.is_ready = False
        self.is_destroyed = True
