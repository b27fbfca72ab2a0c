"""Region model for the trim selection.

This module provides the canonical ``[start, end]`` selection together
with the clip duration bound. Every input source goes through it, so
the selection can never reach an invalid state.
"""

import math
from dataclasses import dataclass
from typing import Callable, List, Optional

from ..constants import RegionConstants


@dataclass(frozen=True)
class Region:
    """A start/end time pair in seconds."""

    start: float
    end: float

    @property
    def length(self) -> float:
        return self.end - self.start


RegionListener = Callable[[Region], None]


def _is_number(value) -> bool:
    return isinstance(value, (int, float)) and math.isfinite(value)


class RegionModel:
    """Owns the selected region and validates every mutation.

    Invariant: ``0 <= start < end`` and, once the duration is known,
    ``end <= duration``. Mutators return True when the change was
    accepted and False when it was rejected; a rejected call leaves
    the region untouched and does not notify listeners.

    All time values are in seconds.
    """

    def __init__(
        self,
        provisional_end: float = RegionConstants.DEFAULT_PROVISIONAL_END,
        min_gap: float = RegionConstants.MIN_GAP,
    ):
        """Initialize with the placeholder region ``(0, provisional_end)``.

        Args:
            provisional_end: Placeholder end used until the duration is known
            min_gap: Minimum distance kept between start and end when nudging
        """
        if not _is_number(provisional_end) or provisional_end <= 0:
            raise ValueError(f"Invalid provisional end: {provisional_end!r}")
        self._start = 0.0
        self._end = float(provisional_end)
        self._duration: Optional[float] = None
        self._min_gap = min_gap
        self._listeners: List[RegionListener] = []

    # --- Properties ---

    @property
    def start(self) -> float:
        return self._start

    @property
    def end(self) -> float:
        return self._end

    @property
    def duration(self) -> Optional[float]:
        """Clip duration in seconds, or None while unknown."""
        return self._duration

    @property
    def has_duration(self) -> bool:
        return self._duration is not None

    @property
    def region(self) -> Region:
        """Snapshot of the current selection."""
        return Region(self._start, self._end)

    # --- Listeners ---

    def add_listener(self, callback: RegionListener) -> None:
        """Register a callback invoked after every accepted mutation."""
        if callback not in self._listeners:
            self._listeners.append(callback)

    def remove_listener(self, callback: RegionListener) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def _notify(self) -> None:
        region = self.region
        for callback in list(self._listeners):
            callback(region)

    # --- Mutators ---

    def set_duration(self, duration: float) -> bool:
        """Set the clip duration and clamp the region into it.

        If the current end lies beyond the new duration it is clamped to
        it; should that leave ``start >= end``, start falls back to 0.

        Args:
            duration: Clip duration in seconds, must be positive

        Returns:
            True if the duration was accepted
        """
        if not _is_number(duration) or duration <= 0:
            return False

        self._duration = float(duration)
        if self._end > self._duration:
            self._end = self._duration
        if self._start >= self._end:
            self._start = 0.0

        self._notify()
        return True

    def set_start(self, time_seconds: float) -> bool:
        """Move the region start.

        Rejected when negative or not strictly before the current end.
        """
        if not _is_number(time_seconds):
            return False
        if time_seconds < 0 or time_seconds >= self._end:
            return False

        self._start = max(0.0, float(time_seconds))
        self._notify()
        return True

    def set_end(self, time_seconds: float) -> bool:
        """Move the region end.

        Rejected when not strictly after the current start or beyond
        the known duration.
        """
        if not _is_number(time_seconds):
            return False
        if time_seconds <= self._start:
            return False
        if self._duration is not None and time_seconds > self._duration:
            return False

        self._end = float(time_seconds)
        self._notify()
        return True

    def set_region(self, start: float, end: float) -> bool:
        """Replace start and end at once.

        The update is applied as a whole or not at all. Degenerate or
        reversed ranges are rejected rather than swapped.

        Args:
            start: New start in seconds
            end: New end in seconds

        Returns:
            True if the region was accepted
        """
        if not (_is_number(start) and _is_number(end)):
            return False
        if start < 0 or start >= end:
            return False
        if self._duration is not None and end > self._duration:
            return False

        self._start = max(0.0, float(start))
        self._end = float(end)
        self._notify()
        return True

    def nudge_start(self, delta: float) -> bool:
        """Shift start by ``delta`` seconds, clamped to the legal range.

        Start stays within ``[0, end - min_gap]``.
        """
        if not _is_number(delta):
            return False
        upper = max(0.0, self._end - self._min_gap)
        target = max(0.0, min(self._start + delta, upper))
        if target == self._start:
            return False
        return self.set_start(target)

    def nudge_end(self, delta: float) -> bool:
        """Shift end by ``delta`` seconds, clamped to the legal range.

        End stays within ``[start + min_gap, duration]``.
        """
        if not _is_number(delta):
            return False
        target = max(self._start + self._min_gap, self._end + delta)
        if self._duration is not None:
            target = min(target, self._duration)
        if target == self._end:
            return False
        return self.set_end(target)

    def reset(
        self, provisional_end: float = RegionConstants.DEFAULT_PROVISIONAL_END
    ) -> None:
        """Return to the placeholder region with an unknown duration."""
        self._start = 0.0
        self._end = float(provisional_end)
        self._duration = None
        self._notify()

    def __repr__(self) -> str:
        return (
            f"RegionModel(start={self._start}, end={self._end}, "
            f"duration={self._duration})"
        )
