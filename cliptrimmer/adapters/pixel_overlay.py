"""Manual pixel overlay selection.

Used when the clip audio could not be decoded. A press-drag-release
gesture over a fixed-width surface is mapped linearly onto the clip
duration:

    seconds = (pixel_x / width_px) * duration
"""

from typing import Callable, Optional, Tuple

from ..constants import UIConstants
from ..region import RegionModel

PreviewCallback = Callable[[float, float], None]


class PixelOverlayAdapter:
    """Turns pointer gestures on the overlay into region updates.

    The duration used for the mapping is the model's duration when
    known, otherwise the assumed duration given at construction.
    """

    def __init__(
        self,
        model: RegionModel,
        width_px: int,
        assumed_duration: float,
        on_preview: Optional[PreviewCallback] = None,
        drag_slop_px: int = UIConstants.DRAG_SLOP_PX,
    ):
        """Initialize the adapter.

        Args:
            model: Region model of the session
            width_px: Width of the overlay surface in pixels
            assumed_duration: Duration to use while the real one is unknown
            on_preview: Called with (start, end) while dragging
            drag_slop_px: Minimum movement before a press becomes a selection
        """
        self.model = model
        self.width_px = width_px
        self.assumed_duration = assumed_duration
        self.on_preview = on_preview
        self.drag_slop_px = drag_slop_px
        self.enabled = False
        self._press_x: Optional[float] = None

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.enabled = False
        self._press_x = None

    def set_width(self, width_px: int) -> None:
        """Update the surface width after a resize."""
        self.width_px = width_px

    @property
    def duration(self) -> float:
        if self.model.duration is not None:
            return self.model.duration
        return self.assumed_duration

    @property
    def is_dragging(self) -> bool:
        return self._press_x is not None

    def pixel_to_time(self, pixel_x: float) -> Optional[float]:
        """Convert an overlay X position to seconds.

        Returns:
            Time in seconds clamped to the duration, or None if the
            surface has no width
        """
        if self.width_px <= 0 or self.duration <= 0:
            return None
        fraction = max(0.0, min(1.0, pixel_x / self.width_px))
        return min(fraction * self.duration, self.duration)

    def time_to_pixel(self, time_seconds: float) -> Optional[float]:
        if self.width_px <= 0 or self.duration <= 0:
            return None
        return (time_seconds / self.duration) * self.width_px

    # --- Gesture ---

    def press(self, pixel_x: float) -> None:
        if not self.enabled:
            return
        self._press_x = pixel_x

    def move(self, pixel_x: float) -> Optional[Tuple[float, float]]:
        """Preview the selection while dragging.

        Returns:
            Previewed (start, end) in seconds, or None
        """
        span = self._span(pixel_x)
        if span is not None and self.on_preview is not None:
            self.on_preview(*span)
        return span

    def release(self, pixel_x: float) -> bool:
        """Finish the gesture and submit the selection.

        Returns:
            True if the region model accepted the selection
        """
        span = self._span(pixel_x)
        self._press_x = None
        if span is None:
            return False
        return self.model.set_region(*span)

    def _span(self, pixel_x: float) -> Optional[Tuple[float, float]]:
        if not self.enabled or self._press_x is None:
            return None
        if abs(pixel_x - self._press_x) < self.drag_slop_px:
            return None

        start = self.pixel_to_time(min(self._press_x, pixel_x))
        end = self.pixel_to_time(max(self._press_x, pixel_x))
        if start is None or end is None:
            return None
        return start, end
