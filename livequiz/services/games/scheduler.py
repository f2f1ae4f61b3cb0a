import logging
import time
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class TimerHandle:
    """A one-shot timer that can be canceled until it fires."""

    def __init__(self, delay: float, callback: Callable[[], None], label: str = ''):
        self.delay = delay
        self.label = label
        self._callback = callback
        self.cancelled = False
        self.fired = False

    @property
    def pending(self) -> bool:
        return not (self.cancelled or self.fired)

    def cancel(self) -> None:
        self.cancelled = True

    def fire(self) -> None:
        if not self.pending:
            return
        self.fired = True
        self._callback()


class BackgroundScheduler:
    """Runs timers as Socket.IO background tasks.

    Each callback runs while holding ``lock``, the same lock every socket
    handler holds, so a timer never interleaves with message handling. The
    cancel flag is re-checked once the lock is held: a timer canceled by a
    handler that was running when the delay elapsed never fires.
    """

    def __init__(self, socketio, lock, sleep: Optional[Callable[[float], None]] = None):
        self._socketio = socketio
        self._lock = lock
        self._sleep = sleep or socketio.sleep

    def call_later(self, delay: float, callback: Callable[[], None], label: str = '') -> TimerHandle:
        handle = TimerHandle(delay, callback, label)
        logger.debug(f"[timer-set] {label} delay={delay}s")
        self._socketio.start_background_task(self._worker, handle)
        return handle

    def _worker(self, handle: TimerHandle) -> None:
        self._sleep(handle.delay)
        with self._lock:
            if handle.cancelled:
                logger.debug(f"[timer-abort] {handle.label} canceled")
                return
            logger.debug(f"[timer-fire] {handle.label}")
            try:
                handle.fire()
            except Exception:
                logger.exception(f"[timer-error] {handle.label}")


class ManualScheduler:
    """Scheduler driven by an explicit clock, for tests and tooling.

    ``advance(seconds)`` moves the clock forward and fires due timers in
    order, including timers scheduled by callbacks that fall inside the
    advanced window.
    """

    def __init__(self, start: float = 0.0):
        self.now = start
        self._timers = []
        self._seq = 0

    def clock(self) -> float:
        return self.now

    def call_later(self, delay: float, callback: Callable[[], None], label: str = '') -> TimerHandle:
        handle = TimerHandle(delay, callback, label)
        self._seq += 1
        self._timers.append((self.now + delay, self._seq, handle))
        return handle

    @property
    def pending(self):
        return [h for _, _, h in self._timers if h.pending]

    def advance(self, seconds: float) -> None:
        target = self.now + seconds
        while True:
            due = sorted(t for t in self._timers if t[2].pending and t[0] <= target)
            if not due:
                break
            when, _, handle = due[0]
            self.now = max(self.now, when)
            handle.fire()
        self._timers = [t for t in self._timers if t[2].pending]
        self.now = target


def monotonic_clock() -> float:
    return time.monotonic()
