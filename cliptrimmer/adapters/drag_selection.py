"""Drag selection on the waveform.

Forwards regions created or changed by dragging on the waveform to the
region model, keeping exactly one region on the waveform at a time.
"""

from typing import TYPE_CHECKING, Optional

from ..region import RegionModel, SyncBroadcaster

if TYPE_CHECKING:
    from ..audio.waveform import Waveform, WaveformRegion


class DragSelectionAdapter:
    """Maps waveform region events to region model updates."""

    def __init__(
        self,
        model: RegionModel,
        waveform: "Waveform",
        broadcaster: Optional[SyncBroadcaster] = None,
    ):
        """Initialize the adapter and subscribe to the waveform.

        Args:
            model: Region model of the session
            waveform: Waveform emitting region events
            broadcaster: Used to snap visuals back after a rejected drag
        """
        self.model = model
        self.waveform = waveform
        self.broadcaster = broadcaster
        self.enabled = False

        waveform.on("region-created", self.on_region_created)
        waveform.on("region-updated", self.on_region_updated)

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False

    def on_region_created(self, region: "WaveformRegion") -> bool:
        """Keep only ``region`` and make it the selection."""
        if not self.enabled:
            region.remove()
            return False

        for other in self.waveform.regions:
            if other is not region:
                other.remove()
        return self._apply(region)

    def on_region_updated(self, region: "WaveformRegion") -> bool:
        """Forward a resized or moved region."""
        if not self.enabled:
            return False
        return self._apply(region)

    def _apply(self, region: "WaveformRegion") -> bool:
        accepted = self.model.set_region(region.start, region.end)
        if not accepted and self.broadcaster is not None:
            self.broadcaster.refresh()
        return accepted
