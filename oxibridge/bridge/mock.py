# oxibridge/bridge/mock.py
from __future__ import annotations

import logging
import random
import threading
import time
from typing import Optional

from oxibridge.interfaces.bridge import (
    Bridge,
    ErrorCallback,
    ReadingCallback,
    SuccessCallback,
)
from oxibridge.model.reading import Reading
from oxibridge.runtime.timer import RepeatingTimer

TICK_INTERVAL_S = 0.5

SPO2_RANGE = (95, 100)   # half-open
HR_RANGE = (70, 75)      # half-open


class MockDeviceBridge(Bridge):
    """
    Simulated oximeter for UI development and tests.

    Every query succeeds on the calling thread. start() streams a synthetic
    Reading every TICK_INTERVAL_S until stop() or the next start(). The error
    continuation is never called.
    """

    def __init__(
        self,
        *,
        interval_s: float = TICK_INTERVAL_S,
        rng: Optional[random.Random] = None,
        logger: Optional[logging.Logger] = None,
    ):
        self._interval_s = float(interval_s)
        self._rng = rng or random.Random()
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._timer: Optional[RepeatingTimer] = None

    @property
    def is_started(self) -> bool:
        with self._lock:
            return self._timer is not None

    def request_permissions(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        on_success(None)

    def is_bluetooth_enabled(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        on_success(True)

    def request_bluetooth_enable(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        on_success(True)

    def is_paired(
        self,
        address: str,
        on_success: SuccessCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        on_success(True)

    def start(
        self,
        address: str,
        on_success: ReadingCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        last_ts = 0

        def _tick() -> None:
            nonlocal last_ts
            last_ts = max(last_ts, int(time.time() * 1000))
            on_success(self._synthesize(last_ts))

        timer = RepeatingTimer(
            self._interval_s,
            _tick,
            name=f"mock-oximeter-{address}",
            logger=self._log,
        )

        with self._lock:
            previous, self._timer = self._timer, timer

        # never cancel while holding self._lock: the tick may call back into us
        if previous is not None:
            previous.cancel()
            self._log.info("SESSION_REPLACED address=%s", address)

        self._log.info("SESSION_START address=%s interval_s=%.3f", address, self._interval_s)
        timer.start()

    def stop(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        with self._lock:
            timer, self._timer = self._timer, None

        if timer is not None:
            timer.cancel()
            self._log.info("SESSION_STOP ticks=%d", timer.ticks)

        on_success(None)

    def _synthesize(self, timestamp_ms: int) -> Reading:
        return Reading(
            timestamp=timestamp_ms,
            spo2=self._rng.randrange(*SPO2_RANGE),
            hr=self._rng.randrange(*HR_RANGE),
            has_artifacts=False,
            has_sustained_artifacts=False,
            nofinger=False,
            batterylow=False,
        )
