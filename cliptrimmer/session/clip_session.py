"""Clip session state.

A session covers one "get clip -> edit -> download" cycle for a single
clip URL. Only one session is live at a time; the session controller
closes the previous one before creating the next.
"""

import itertools
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, Dict, Optional, Union

from ..constants import RegionConstants
from ..region import RegionModel

if TYPE_CHECKING:
    from ..audio.waveform import Waveform


class SessionStatus(Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class EditorState(Enum):
    """States of the editing surface.

    AWAITING_CLIP -> LOADING -> WAVEFORM_READY | MANUAL_FALLBACK | LOAD_FAILED
    """

    AWAITING_CLIP = "awaiting_clip"
    LOADING = "loading"
    WAVEFORM_READY = "waveform_ready"
    MANUAL_FALLBACK = "manual_fallback"
    LOAD_FAILED = "load_failed"


class DurationSource(Enum):
    """Where the applied clip duration came from."""

    PROVISIONAL = "provisional"
    DECODED = "decoded"
    BACKEND = "backend"
    MEDIA = "media"


# --- Editing surface variants ---


@dataclass(frozen=True)
class Unavailable:
    """No editing surface (loading, failed or no clip)."""


@dataclass(frozen=True)
class WaveformBacked:
    """Decoded audio with a draggable region."""

    handle: "Waveform"


@dataclass(frozen=True)
class ManualOverlay:
    """Pixel-mapped selection overlay used when decoding failed."""

    width_px: int


EditingSurface = Union[Unavailable, WaveformBacked, ManualOverlay]

_session_ids = itertools.count(1)


class ClipSession:
    """State of one clip editing cycle.

    Attributes:
        session_id: Monotonic id used to discard stale responses
        source_url: Clip URL entered by the user
        status: Current session status
        region: Region model owned by this session
        surface: Active editing surface variant
        clip_url: Media URL resolved by the backend
        duration_source: Source of the duration applied to the region
        applied_duration: Duration the editor opened or was refined with
    """

    # Fallback preference, highest first
    FALLBACK_SOURCES = (DurationSource.BACKEND, DurationSource.MEDIA)

    def __init__(
        self,
        source_url: str,
        provisional_end: float = RegionConstants.DEFAULT_PROVISIONAL_END,
    ):
        self.session_id = next(_session_ids)
        self.source_url = source_url
        self.status = SessionStatus.IDLE
        self.provisional_end = provisional_end
        self.region = RegionModel(provisional_end)
        self.surface: EditingSurface = Unavailable()
        self.clip_url: Optional[str] = None
        self.duration_source = DurationSource.PROVISIONAL
        self.applied_duration = float(provisional_end)
        self.playback_adapter: Optional[Any] = None
        self.decode_attempt: Optional[Any] = None
        self._durations: Dict[DurationSource, float] = {}
        self._closed = False

    @property
    def is_closed(self) -> bool:
        return self._closed

    @property
    def waveform_available(self) -> bool:
        return isinstance(self.surface, WaveformBacked)

    @property
    def is_editable(self) -> bool:
        return self.status == SessionStatus.READY and not self._closed

    def record_duration(self, source: DurationSource, duration: float) -> None:
        """Remember a duration candidate reported by ``source``."""
        if duration and duration > 0:
            self._durations[source] = float(duration)

    def get_duration(self, source: DurationSource) -> Optional[float]:
        return self._durations.get(source)

    def best_fallback_duration(self):
        """Pick the duration for manual fallback mode.

        Returns:
            Tuple of (duration, source); backend metadata wins over media
            metadata, the provisional placeholder is the last resort.
        """
        for source in self.FALLBACK_SOURCES:
            if source in self._durations:
                return self._durations[source], source
        return self.provisional_end, DurationSource.PROVISIONAL

    def close(self) -> None:
        """Release everything the session holds.

        Stops playback polling, cancels a pending decode deadline and
        destroys the waveform instance. Safe to call more than once.
        """
        if self._closed:
            return
        self._closed = True

        if self.playback_adapter is not None:
            self.playback_adapter.disable()
            self.playback_adapter = None

        if self.decode_attempt is not None:
            self.decode_attempt.cancel()
            self.decode_attempt = None

        if isinstance(self.surface, WaveformBacked):
            self.surface.handle.destroy()
        self.surface = Unavailable()

    def __repr__(self) -> str:
        return (
            f"ClipSession(id={self.session_id}, status={self.status.name}, "
            f"region={self.region.region})"
        )
