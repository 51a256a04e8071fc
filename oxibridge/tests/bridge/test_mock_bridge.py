from __future__ import annotations

import random
import threading
import time

import pytest

from oxibridge.bridge.mock import HR_RANGE, SPO2_RANGE, TICK_INTERVAL_S, MockDeviceBridge
from oxibridge.model import Reading

ADDR = "AA:BB:CC:DD:EE:FF"


class Collector:
    def __init__(self):
        self.readings: list[Reading] = []
        self.errors: list[str] = []
        self._lock = threading.Lock()

    def on_reading(self, r: Reading) -> None:
        with self._lock:
            self.readings.append(r)

    def on_error(self, reason: str) -> None:
        self.errors.append(reason)

    @property
    def count(self) -> int:
        with self._lock:
            return len(self.readings)


def _wait_for(pred, timeout=2.0):
    deadline = time.monotonic() + timeout
    while not pred() and time.monotonic() < deadline:
        time.sleep(0.005)
    return pred()


def _stop(bridge) -> None:
    bridge.stop(lambda _=None: None, lambda _r: None)


def test_default_interval_is_500ms():
    assert TICK_INTERVAL_S == 0.5


@pytest.mark.parametrize(
    "op, args, expected",
    [
        ("request_permissions", (), None),
        ("is_bluetooth_enabled", (), True),
        ("request_bluetooth_enable", (), True),
        ("is_paired", (ADDR,), True),
    ],
)
def test_queries_succeed_on_calling_thread(op, args, expected):
    bridge = MockDeviceBridge()
    got = []
    errors = []

    getattr(bridge, op)(*args, lambda v: got.append((v, threading.current_thread())), errors.append)

    # same tick: already delivered when the call returns
    assert got == [(expected, threading.current_thread())]
    assert errors == []


def test_stop_without_session_succeeds_without_side_effects():
    bridge = MockDeviceBridge()
    got = []

    bridge.stop(got.append, pytest.fail)
    bridge.stop(got.append, pytest.fail)

    assert got == [None, None]
    assert bridge.is_started is False


def test_readings_are_in_range_with_flags_false_and_ordered():
    bridge = MockDeviceBridge(interval_s=0.01)
    c = Collector()

    bridge.start(ADDR, c.on_reading, c.on_error)
    assert _wait_for(lambda: c.count >= 30)
    _stop(bridge)

    assert c.errors == []
    prev_ts = 0
    for r in c.readings:
        assert SPO2_RANGE[0] <= r.spo2 < SPO2_RANGE[1]
        assert HR_RANGE[0] <= r.hr < HR_RANGE[1]
        assert r.has_artifacts is False
        assert r.has_sustained_artifacts is False
        assert r.nofinger is False
        assert r.batterylow is False
        assert r.timestamp >= prev_ts
        prev_ts = r.timestamp


def test_reading_timestamp_is_wall_clock_ms():
    bridge = MockDeviceBridge(interval_s=0.01)
    c = Collector()

    before = int(time.time() * 1000)
    bridge.start(ADDR, c.on_reading)
    assert _wait_for(lambda: c.count >= 1)
    _stop(bridge)
    after = int(time.time() * 1000)

    assert before <= c.readings[0].timestamp <= after


def test_mock_readings_carry_no_extended_fields():
    bridge = MockDeviceBridge(interval_s=0.01)
    c = Collector()
    bridge.start(ADDR, c.on_reading)
    assert _wait_for(lambda: c.count >= 1)
    _stop(bridge)

    assert set(c.readings[0].as_dict()) == {
        "timestamp", "spo2", "hr", "hasArtifacts", "hasSustainedArtifacts", "nofinger", "batterylow",
    }


def test_values_drawn_from_injected_rng():
    bridge = MockDeviceBridge(interval_s=0.01, rng=random.Random(7))
    c = Collector()
    bridge.start(ADDR, c.on_reading)
    assert _wait_for(lambda: c.count >= 2)
    _stop(bridge)

    ref = random.Random(7)
    expected = [(ref.randrange(95, 100), ref.randrange(70, 75)) for _ in range(2)]
    assert [(r.spo2, r.hr) for r in c.readings[:2]] == expected


def test_no_readings_after_stop():
    bridge = MockDeviceBridge(interval_s=0.01)
    c = Collector()

    bridge.start(ADDR, c.on_reading)
    assert _wait_for(lambda: c.count >= 3)
    _stop(bridge)
    n = c.count
    time.sleep(0.1)

    assert c.count == n
    assert bridge.is_started is False


def test_restart_replaces_continuation_and_keeps_single_stream():
    addr = "11:22:33:44:55:66"
    bridge = MockDeviceBridge(interval_s=0.01)
    first, second = Collector(), Collector()

    bridge.start(addr, first.on_reading)
    assert _wait_for(lambda: first.count >= 2)
    bridge.start(addr, second.on_reading)
    n_first = first.count

    assert _wait_for(lambda: second.count >= 5)
    _stop(bridge)

    assert first.count == n_first
    stream_threads = [t for t in threading.enumerate() if t.name == f"mock-oximeter-{addr}" and t.is_alive()]
    assert stream_threads == []


def test_many_restarts_leave_at_most_one_timer():
    bridge = MockDeviceBridge(interval_s=0.05)
    collectors = [Collector() for _ in range(10)]

    for c in collectors:
        bridge.start(ADDR, c.on_reading)
    time.sleep(0.2)
    _stop(bridge)

    assert all(c.count == 0 for c in collectors[:-1])
    assert collectors[-1].count > 0


def test_stop_from_inside_callback():
    bridge = MockDeviceBridge(interval_s=0.01)
    got = []

    def _on_reading(r):
        got.append(r)
        bridge.stop(lambda _=None: None)

    bridge.start(ADDR, _on_reading)
    assert _wait_for(lambda: len(got) >= 1)
    time.sleep(0.05)

    assert len(got) == 1
    assert bridge.is_started is False


def test_callback_exception_does_not_end_stream():
    bridge = MockDeviceBridge(interval_s=0.01)
    calls = []

    def _on_reading(r):
        calls.append(r)
        if len(calls) == 1:
            raise RuntimeError("consumer bug")

    bridge.start(ADDR, _on_reading)
    assert _wait_for(lambda: len(calls) >= 3)
    _stop(bridge)


def test_instances_are_isolated():
    a, b = MockDeviceBridge(interval_s=0.01), MockDeviceBridge(interval_s=0.01)
    ca, cb = Collector(), Collector()

    a.start(ADDR, ca.on_reading)
    b.start(ADDR, cb.on_reading)
    assert _wait_for(lambda: ca.count >= 2 and cb.count >= 2)
    _stop(a)
    n_a = ca.count
    n_b = cb.count
    time.sleep(0.05)

    assert ca.count == n_a
    assert cb.count > n_b
    _stop(b)


def test_error_continuation_never_called():
    bridge = MockDeviceBridge(interval_s=0.01)
    c = Collector()
    bridge.request_permissions(lambda _: None, c.on_error)
    bridge.start(ADDR, c.on_reading, c.on_error)
    assert _wait_for(lambda: c.count >= 2)
    bridge.stop(lambda _: None, c.on_error)

    assert c.errors == []


# ---------------- real-cadence scenarios ----------------

def test_scenario_four_readings_in_2100ms_then_none_after_stop():
    bridge = MockDeviceBridge()
    c = Collector()

    bridge.start("AA:BB:CC:DD:EE:FF", c.on_reading, c.on_error)
    time.sleep(2.1)
    assert c.count == 4

    _stop(bridge)
    time.sleep(1.0)
    assert c.count == 4


def test_scenario_restart_without_stop_counts_two():
    bridge = MockDeviceBridge()
    c = Collector()

    bridge.start(ADDR, c.on_reading)
    time.sleep(0.6)
    assert c.count == 1

    bridge.start(ADDR, c.on_reading)
    time.sleep(0.6)
    _stop(bridge)

    assert c.count == 2
