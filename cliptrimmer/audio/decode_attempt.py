"""Decode attempt with a deadline.

Loading the waveform either succeeds or it does not; a hung fetch must
not keep the editor in the loading state. The attempt settles exactly
once, on the event loop, with whichever comes first: the decoded audio,
a failure, or the deadline.
"""

from concurrent.futures import Future
from typing import Any, Callable, Optional

from ..utils.main_loop import MainLoopDispatcher
from .decoder import DecodedAudio


class DecodeTimeout(Exception):
    """Decoding did not finish before the deadline."""


class DecodeAttempt:
    """One background decode with an explicit deadline.

    Exactly one of ``on_success``/``on_failure`` is called, always on
    the event loop. Results arriving after the attempt settled or was
    cancelled are ignored.
    """

    def __init__(
        self,
        dispatcher: MainLoopDispatcher,
        work: Callable[[], DecodedAudio],
        timeout_s: float,
        on_success: Callable[[DecodedAudio], Any],
        on_failure: Callable[[Exception], Any],
    ):
        """Initialize the attempt.

        Args:
            dispatcher: Event loop dispatcher
            work: Fetches and decodes the clip, runs off the event loop
            timeout_s: Deadline in seconds
            on_success: Called with the decoded audio
            on_failure: Called with the exception or a DecodeTimeout
        """
        self.dispatcher = dispatcher
        self.work = work
        self.timeout_s = timeout_s
        self.on_success = on_success
        self.on_failure = on_failure
        self._deadline_job: Optional[str] = None
        self._settled = False
        self._started = False

    @property
    def is_settled(self) -> bool:
        return self._settled

    def start(self) -> None:
        """Start decoding and arm the deadline."""
        if self._started:
            return
        self._started = True
        self._deadline_job = self.dispatcher.schedule(
            int(self.timeout_s * 1000), self._on_deadline
        )
        self.dispatcher.submit(self.work, self._on_done)

    def cancel(self) -> None:
        """Drop the attempt without calling either callback."""
        self._settled = True
        self._disarm()

    def _on_done(self, future: Future) -> None:
        if self._settled:
            return
        self._settled = True
        self._disarm()

        try:
            decoded = future.result()
        except Exception as e:
            self.on_failure(e)
            return
        self.on_success(decoded)

    def _on_deadline(self) -> None:
        self._deadline_job = None
        if self._settled:
            return
        self._settled = True
        self.on_failure(
            DecodeTimeout(f"Audio not decoded within {self.timeout_s:g}s")
        )

    def _disarm(self) -> None:
        if self._deadline_job is not None:
            self.dispatcher.cancel(self._deadline_job)
            self._deadline_job = None
