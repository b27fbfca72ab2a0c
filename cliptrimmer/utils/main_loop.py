"""Main loop dispatcher for background work.

Network requests and audio decoding run on worker threads. Their
results must never touch the session directly from those threads; they
are queued here and applied on the Tk event loop instead.
"""

import queue
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from ..constants import NetworkConstants, UIConstants


class MainLoopDispatcher:
    """Bridges worker threads and the Tk event loop.

    This class provides:
    - Delayed callbacks on the event loop (``schedule``/``cancel``)
    - Thread-safe posting of callbacks (``post``)
    - Background execution with completion on the event loop (``submit``)
    """

    def __init__(
        self,
        root,
        max_workers: int = NetworkConstants.MAX_WORKERS,
        poll_ms: int = UIConstants.DISPATCH_POLL_MS,
        debug: bool = False,
    ):
        """Initialize the dispatcher.

        Args:
            root: Tk root (anything providing ``after``/``after_cancel``)
            max_workers: Worker threads for background tasks
            poll_ms: Interval for draining posted callbacks
            debug: Enable debug output
        """
        self.root = root
        self.debug = debug
        self._poll_ms = poll_ms
        self._queue: "queue.Queue" = queue.Queue()
        self._executor = ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="cliptrimmer"
        )
        self._poll_job: Optional[str] = None
        self._running = False

    def start(self) -> None:
        """Start draining posted callbacks."""
        if self._running:
            return
        self._running = True
        self._poll_job = self.root.after(self._poll_ms, self._drain)

    def shutdown(self) -> None:
        """Stop draining and release the worker threads."""
        self._running = False
        if self._poll_job is not None:
            self.root.after_cancel(self._poll_job)
            self._poll_job = None
        self._executor.shutdown(wait=False, cancel_futures=True)

    def schedule(self, delay_ms: int, callback: Callable[[], Any]) -> str:
        """Run ``callback`` on the event loop after ``delay_ms``."""
        return self.root.after(delay_ms, callback)

    def cancel(self, job_id: Optional[str]) -> None:
        if job_id is not None:
            self.root.after_cancel(job_id)

    def post(self, callback: Callable[..., Any], *args) -> None:
        """Queue ``callback(*args)`` for the event loop. Thread-safe."""
        self._queue.put((callback, args))

    def submit(
        self, work: Callable[[], Any], on_done: Callable[[Future], None]
    ) -> Future:
        """Run ``work`` on a worker thread.

        Args:
            work: Callable executed off the event loop
            on_done: Called with the finished future on the event loop

        Returns:
            The future of the background task
        """
        future = self._executor.submit(work)
        future.add_done_callback(lambda f: self.post(on_done, f))
        return future

    def _drain(self) -> None:
        while True:
            try:
                callback, args = self._queue.get_nowait()
            except queue.Empty:
                break
            try:
                callback(*args)
            except Exception as e:
                # Keep the loop alive; the failing callback is reported
                print(f"[MainLoopDispatcher] Error in posted callback: {e}")
                if self.debug:
                    import traceback

                    traceback.print_exc()

        if self._running:
            self._poll_job = self.root.after(self._poll_ms, self._drain)
