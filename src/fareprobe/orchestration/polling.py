"""Background polling loop on a daemon thread."""

import logging
import threading
from collections.abc import Callable

logger = logging.getLogger(__name__)


class PollingLoop:
    """Calls ``tick`` every ``interval`` seconds on a daemon thread.

    The loop sleeps on a ``threading.Event`` so :meth:`stop` wakes it
    immediately. ``tick`` returns False to end the loop; an exception from
    ``tick`` is logged and the loop keeps going.
    """

    def __init__(
        self,
        name: str,
        tick: Callable[[], bool],
        interval: float,
        initial_delay: float = 0.0,
    ) -> None:
        self.name = name
        self._tick = tick
        self.interval = interval
        self.initial_delay = initial_delay
        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

    @property
    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.is_running:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name=self.name, daemon=True)
        self._thread.start()
        logger.debug(f"Polling loop '{self.name}' started (interval={self.interval}s)")

    def stop(self) -> None:
        """Ask the loop to stop. A tick already running completes first."""
        self._stop.set()

    def join(self, timeout: float | None = None) -> None:
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout)

    def _run(self) -> None:
        if self._stop.wait(self.initial_delay):
            return
        while not self._stop.is_set():
            try:
                keep_going = self._tick()
            except Exception as e:
                logger.error(f"Polling loop '{self.name}' tick failed: {e}", exc_info=True)
                keep_going = True
            if not keep_going:
                break
            if self._stop.wait(self.interval):
                break
        logger.debug(f"Polling loop '{self.name}' stopped")
