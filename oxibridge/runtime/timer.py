# oxibridge/runtime/timer.py
from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Optional


class RepeatingTimer:
    """
    Owned, cancellable fixed-rate timer running ``fn`` on a daemon thread.

    Ticks land on the grid ``t0 + k * interval_s`` (monotonic clock), so the
    cadence does not drift with callback duration. If a tick overruns, missed
    slots are skipped rather than burst-delivered.

    cancel() is synchronous: once it returns, ``fn`` is not running and will
    never run again. It may be called from inside ``fn``, and before start()
    (the timer then never ticks).
    """

    def __init__(
        self,
        interval_s: float,
        fn: Callable[[], None],
        *,
        name: str = "repeating-timer",
        logger: Optional[logging.Logger] = None,
    ):
        if interval_s <= 0:
            raise ValueError("interval_s must be > 0")
        self.interval_s = float(interval_s)
        self._fn = fn
        self._log = logger or logging.getLogger(__name__)

        # held for the duration of each tick; cancel() takes it to wait one out
        self._tick_lock = threading.RLock()
        self._cancelled = threading.Event()
        self._started = False
        self._thread = threading.Thread(target=self._run, name=name, daemon=True)
        self.ticks = 0

    @property
    def is_active(self) -> bool:
        return self._started and not self._cancelled.is_set() and self._thread.is_alive()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def start(self) -> None:
        with self._tick_lock:
            if self._started or self._cancelled.is_set():
                return
            self._started = True
            self._thread.start()

    def cancel(self) -> None:
        self._cancelled.set()
        # wait for an in-flight tick; reentrant when called from fn itself
        with self._tick_lock:
            pass
        if self._started and threading.current_thread() is not self._thread:
            self._thread.join(timeout=self.interval_s + 1.0)

    def _run(self) -> None:
        t0 = time.monotonic()
        k = 1
        while True:
            delay = t0 + k * self.interval_s - time.monotonic()
            if delay > 0 and self._cancelled.wait(delay):
                return

            with self._tick_lock:
                if self._cancelled.is_set():
                    return
                try:
                    self._fn()
                except Exception:
                    self._log.exception("TICK_CALLBACK_ERROR ticks=%d", self.ticks)
                self.ticks += 1

            # next slot strictly in the future
            elapsed = time.monotonic() - t0
            k = max(k + 1, int(elapsed // self.interval_s) + 1)
