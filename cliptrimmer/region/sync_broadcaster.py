"""Pushes the current region to every display surface."""

from typing import Callable, List, Optional, Protocol, Tuple

from ..constants import RegionConstants
from .region_model import Region, RegionModel


class RegionSurface(Protocol):
    """Anything that draws the selected region (e.g. the waveform view)."""

    def show_region(self, start: float, end: float) -> None: ...


TextSetter = Callable[[str], None]


def format_seconds(value: float) -> str:
    """Format a time value for the numeric readouts."""
    return f"{value:.{RegionConstants.DISPLAY_DECIMALS}f}"


class SyncBroadcaster:
    """Keeps all visible representations of the selection consistent.

    The broadcaster listens to one RegionModel at a time. After each
    accepted mutation it updates:
    - Text readouts (start/end formatted with two decimals)
    - Region surfaces such as the waveform region overlay

    Updates are independent of the input that caused the change.
    """

    def __init__(self):
        self._model: Optional[RegionModel] = None
        self._readouts: List[Tuple[TextSetter, TextSetter]] = []
        self._surfaces: List[RegionSurface] = []
        self._broadcasting = False

    @property
    def model(self) -> Optional[RegionModel]:
        return self._model

    def attach(self, model: RegionModel) -> None:
        """Follow a new region model, dropping the previous one.

        Args:
            model: Region model of the current session
        """
        self.detach()
        self._model = model
        model.add_listener(self._on_region_changed)
        self.refresh()

    def detach(self) -> None:
        """Stop following the current model."""
        if self._model is not None:
            self._model.remove_listener(self._on_region_changed)
            self._model = None

    def register_readout(self, set_start: TextSetter, set_end: TextSetter) -> None:
        """Register a pair of text setters for start and end."""
        self._readouts.append((set_start, set_end))
        if self._model is not None:
            self._push_readout(set_start, set_end, self._model.region)

    def register_surface(self, surface: RegionSurface) -> None:
        """Register a visual region indicator."""
        if surface not in self._surfaces:
            self._surfaces.append(surface)
        if self._model is not None:
            region = self._model.region
            surface.show_region(region.start, region.end)

    def unregister_surface(self, surface: RegionSurface) -> None:
        if surface in self._surfaces:
            self._surfaces.remove(surface)

    def refresh(self) -> None:
        """Re-push the current region, e.g. to revert a rejected edit."""
        if self._model is not None:
            self._broadcast(self._model.region)

    def _on_region_changed(self, region: Region) -> None:
        self._broadcast(region)

    def _broadcast(self, region: Region) -> None:
        # A surface may echo the update back into the model
        if self._broadcasting:
            return
        self._broadcasting = True
        try:
            for set_start, set_end in self._readouts:
                self._push_readout(set_start, set_end, region)
            for surface in list(self._surfaces):
                surface.show_region(region.start, region.end)
        finally:
            self._broadcasting = False

    @staticmethod
    def _push_readout(set_start: TextSetter, set_end: TextSetter, region: Region):
        set_start(format_seconds(region.start))
        set_end(format_seconds(region.end))
