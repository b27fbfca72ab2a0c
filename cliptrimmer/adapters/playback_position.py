"""Playback position to region start sync.

While the clip plays, the region start follows the playback position so
the user gets scrubbing feedback. The sync is one-directional and backs
off while the start field has keyboard focus.
"""

from typing import Callable, Optional

from ..constants import UIConstants
from ..region import RegionModel


class PlaybackPositionAdapter:
    """Polls the player on the event loop and proposes new starts."""

    def __init__(
        self,
        model: RegionModel,
        player,
        scheduler,
        field_has_focus: Callable[[], bool],
        interval_ms: int = UIConstants.PLAYBACK_POLL_MS,
    ):
        """Initialize the adapter.

        Args:
            model: Region model of the session
            player: Object with ``is_playing`` and ``position`` (seconds)
            scheduler: Provides ``schedule(ms, callback)`` and ``cancel(job)``
            field_has_focus: Reports whether the start field is being edited
            interval_ms: Polling interval
        """
        self.model = model
        self.player = player
        self.scheduler = scheduler
        self.field_has_focus = field_has_focus
        self.interval_ms = interval_ms
        self.enabled = False
        self._job: Optional[str] = None

    @property
    def is_polling(self) -> bool:
        return self._job is not None

    def enable(self) -> None:
        self.enabled = True
        self.start()

    def disable(self) -> None:
        self.enabled = False
        self.stop()

    def start(self) -> None:
        """Begin polling if not already running."""
        if self._job is None and self.enabled:
            self._job = self.scheduler.schedule(self.interval_ms, self._poll)

    def stop(self) -> None:
        """Cancel the pending poll."""
        if self._job is not None:
            self.scheduler.cancel(self._job)
            self._job = None

    def _poll(self) -> None:
        self._job = None
        if not self.enabled:
            return

        self.sync_once()
        self._job = self.scheduler.schedule(self.interval_ms, self._poll)

    def sync_once(self) -> bool:
        """Propose the current playback position as region start.

        Returns:
            True if the region start was updated
        """
        if not self.player.is_playing or self.field_has_focus():
            return False

        position = max(0.0, self.player.position)
        if self.model.duration is not None:
            position = min(position, self.model.duration)
        if position == self.model.start:
            return False
        return self.model.set_start(position)
