"""Background clock that drives the quiz timer."""

from __future__ import annotations

from collections.abc import Callable
import logging
from threading import Event, Thread

from trivia_app.constants.network_constants import CLOCK_INTERVAL_SECONDS

logger = logging.getLogger(__name__)


class SessionClock:
    """Calls ``on_tick`` on a daemon thread until stopped.

    ``on_tick`` returns how many seconds to sleep before the next call, or
    ``None`` to wait the default ``interval``. The callback owns the deadline,
    so a question that starts between two calls still waits a full interval.
    """

    def __init__(
        self,
        on_tick: Callable[[], float | None],
        interval: float = CLOCK_INTERVAL_SECONDS,
    ) -> None:
        self._on_tick = on_tick
        self._interval = interval
        self._stop_event = Event()
        self._thread: Thread | None = None

    def start(self) -> None:
        if self.is_running():
            return
        self._stop_event.clear()
        self._thread = Thread(target=self._run, name="QuizSessionClock", daemon=True)
        self._thread.start()

    def stop(self, timeout: float | None = None) -> None:
        self._stop_event.set()
        if self._thread is not None:
            self._thread.join(timeout)
            self._thread = None

    def is_running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def _run(self) -> None:
        delay = self._interval
        while not self._stop_event.wait(delay):
            try:
                requested = self._on_tick()
            except Exception:
                logger.exception("Session clock tick failed")
                requested = None
            # never sleep longer than one interval
            delay = self._interval if requested is None else min(max(requested, 0.0), self._interval)
