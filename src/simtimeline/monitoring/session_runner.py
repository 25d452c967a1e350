"""
Periodic tick loop for an AlarmSession.

One background thread per session with a threading.Event as the
cancellation token. Ticks run on a fixed schedule and never overlap; a tick
that falls due while another is still processing is skipped, not queued.
"""

import logging
import math
import threading
import time
from typing import Callable, Optional

from .alarm_session import AlarmSession, SessionState

logger = logging.getLogger(__name__)


class SessionRunner:
    """
    Drives ``session.tick()`` at a fixed interval.

    Sessions are independent: each runner owns one session and shares no
    state with other runners.
    """

    def __init__(
        self,
        session: AlarmSession,
        interval_seconds: Optional[float] = None,
        monotonic: Callable[[], float] = time.monotonic,
    ):
        if interval_seconds is None:
            interval_seconds = session.settings.tick_interval_sec
        if interval_seconds <= 0:
            raise ValueError(f"interval_seconds must be > 0, got {interval_seconds}")

        self.session = session
        self.interval_seconds = interval_seconds
        self._monotonic = monotonic
        self._cancel_event = threading.Event()
        # Reentrant so stop() may be called from a listener inside a tick
        self._tick_lock = threading.RLock()
        self._stats_lock = threading.Lock()
        self._thread: Optional[threading.Thread] = None

        self.completed_ticks = 0
        self.skipped_ticks = 0

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    # ── lifecycle ──────────────────────────────────────────────────

    def start(self) -> None:
        """Launch the tick loop in a background thread."""
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._loop, name="session-ticker", daemon=True)
        self._thread.start()

    def stop(self, timeout: float = 2.0) -> None:
        """Cancel the loop and end the session.

        Waits for an in-flight tick to finish before ending the session.
        Safe to call multiple times or on a runner that never started.
        """
        self._cancel_event.set()
        if self._thread is not None and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning(f"Tick thread still busy after {timeout}s; waiting for it")
        with self._tick_lock:
            self.session.end()

    # ── ticking ────────────────────────────────────────────────────

    def tick_once(self) -> bool:
        """Run one tick unless another is still in progress.

        Returns:
            True if the tick ran, False if it was skipped
        """
        if not self._tick_lock.acquire(blocking=False):
            with self._stats_lock:
                self.skipped_ticks += 1
            logger.debug("Tick skipped: previous tick still processing")
            return False
        try:
            self.session.tick()
            with self._stats_lock:
                self.completed_ticks += 1
        finally:
            self._tick_lock.release()
        return True

    def _loop(self) -> None:
        next_due = self._monotonic() + self.interval_seconds
        while not self._cancel_event.wait(max(0.0, next_due - self._monotonic())):
            if self.session.state is SessionState.ENDED:
                break
            try:
                self.tick_once()
            except Exception:
                logger.exception("Session tick failed")

            next_due += self.interval_seconds
            now = self._monotonic()
            if now > next_due:
                # Overran one or more slots: drop them instead of catching up
                missed = math.ceil((now - next_due) / self.interval_seconds)
                with self._stats_lock:
                    self.skipped_ticks += missed
                next_due += missed * self.interval_seconds
                logger.debug(f"Tick overran; skipped {missed} slot(s)")
        logger.debug(f"Tick loop stopped after {self.completed_ticks} ticks")
