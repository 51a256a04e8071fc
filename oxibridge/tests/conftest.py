from __future__ import annotations

import threading
import time
from typing import Dict, List, Optional

import pytest

from oxibridge.transport.base import Transport
from oxibridge.transport.errors import TransportIOError, TransportOpenError


def _frame_bytes(status: int = 0x80, pleth: int = 0, extra: int = 0) -> bytes:
    status |= 0x80
    body = bytes([status, (pleth >> 8) & 0xFF, pleth & 0xFF, extra & 0xFF])
    return body + bytes([sum(body) & 0xFF])


def _packet_bytes(
    *,
    hr: int = 72,
    spo2: int = 97,
    timer: int = 0,
    stat2: int = 0,
    beat_spo2: Optional[int] = None,
    extras: Optional[Dict[int, int]] = None,
    status: int = 0x80,
    flags_at: Optional[Dict[int, int]] = None,
    pleth: Optional[List[int]] = None,
) -> bytes:
    """A full 25-frame packet with the given values in their frame slots."""
    ex = {i: 0 for i in range(25)}
    ex[0] = (hr >> 7) & 0x03
    ex[1] = hr & 0x7F
    ex[2] = spo2
    ex[5] = (timer >> 7) & 0x7F
    ex[6] = timer & 0x7F
    ex[7] = stat2
    ex[10] = spo2 if beat_spo2 is None else beat_spo2
    ex.update(extras or {})

    out = b""
    for i in range(25):
        st = status | (flags_at or {}).get(i, 0)
        if i == 0:
            st |= 0x01
        else:
            st &= ~0x01
        out += _frame_bytes(st, (pleth or [0] * 25)[i], ex[i])
    return out


@pytest.fixture
def frame_bytes():
    return _frame_bytes


@pytest.fixture
def packet_bytes():
    return _packet_bytes


class ScriptedTransport(Transport):
    """In-memory transport: tests push inbound chunks and inspect writes."""

    instances: List["ScriptedTransport"] = []
    fail_open = False

    def __init__(self, port: str = "fake0", **params):
        self.port = port
        self.params = params
        self.opened = False
        self.closed = False
        self.written: List[bytes] = []
        self._chunks: List[bytes] = []
        self._lost = False
        self._lock = threading.Lock()
        type(self).instances.append(self)

    def open(self) -> None:
        if type(self).fail_open:
            raise TransportOpenError(f"cannot open {self.port}")
        self.opened = True

    def close(self) -> None:
        self.closed = True

    def read(self, n: int) -> bytes:
        with self._lock:
            if self._lost:
                raise TransportIOError("link dropped")
            if self._chunks:
                return self._chunks.pop(0)
        time.sleep(0.002)
        return b""

    def write(self, data: bytes) -> int:
        self.written.append(bytes(data))
        return len(data)

    def flush(self) -> None: ...

    # test controls
    def push(self, data: bytes) -> None:
        with self._lock:
            self._chunks.append(bytes(data))

    def lose(self) -> None:
        with self._lock:
            self._lost = True


@pytest.fixture
def scripted_transport_cls():
    """Fresh ScriptedTransport subclass per test (own instance list / flags)."""
    cls = type("ScriptedTransport", (ScriptedTransport,), {"instances": [], "fail_open": False})
    return cls


def wait_for(pred, timeout: float = 2.0) -> bool:
    deadline = time.monotonic() + timeout
    while not pred() and time.monotonic() < deadline:
        time.sleep(0.005)
    return pred()


@pytest.fixture
def wait():
    return wait_for
