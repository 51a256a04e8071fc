# oxibridge/protocol/frame.py
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

FRAME_SIZE = 5

STATUS_BYTE = 0
PLETH_MSB_BYTE = 1
PLETH_LSB_BYTE = 2
EXTRA_BYTE = 3
CHECKSUM_BYTE = 4

# STATUS bits
STATUS_ALWAYS_SET = 0x80
STATUS_ARTIFACT = 0x20
STATUS_OUT_OF_TRACK = 0x10
STATUS_SENSOR_ALARM = 0x08
STATUS_RED_PERFUSION = 0x04
STATUS_GREEN_PERFUSION = 0x02
STATUS_SYNC = 0x01


class PulseQuality(Enum):
    """Pulse signal quality; only reported for ~160 ms during a pulse."""
    OUTSIDE_PULSE = "outside_pulse"
    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"


def is_valid_frame(buf: bytes) -> bool:
    """
    A 5-byte window is a frame iff STATUS bit 7 is set and the last byte is
    the mod-256 sum of the first four.
    """
    if len(buf) < FRAME_SIZE:
        return False
    if not buf[STATUS_BYTE] & STATUS_ALWAYS_SET:
        return False
    return buf[CHECKSUM_BYTE] == (sum(buf[:CHECKSUM_BYTE]) & 0xFF)


def is_sync_frame(buf: bytes) -> bool:
    return bool(buf[STATUS_BYTE] & STATUS_SYNC)


@dataclass(frozen=True)
class NoninFrame:
    """One decoded 5-byte record of the Nonin serial data format."""
    status: int
    pleth: int
    extra: int

    @classmethod
    def from_bytes(cls, buf: bytes) -> "NoninFrame":
        if len(buf) < FRAME_SIZE:
            raise ValueError(f"Frame needs {FRAME_SIZE} bytes, got {len(buf)}")
        return cls(
            status=buf[STATUS_BYTE],
            pleth=(buf[PLETH_MSB_BYTE] << 8) | buf[PLETH_LSB_BYTE],
            extra=buf[EXTRA_BYTE],
        )

    @property
    def is_sync(self) -> bool:
        return bool(self.status & STATUS_SYNC)

    @property
    def has_artifact(self) -> bool:
        return bool(self.status & STATUS_ARTIFACT)

    @property
    def is_out_of_track(self) -> bool:
        return bool(self.status & STATUS_OUT_OF_TRACK)

    @property
    def has_sensor_alarm(self) -> bool:
        # also raised when the finger is removed
        return bool(self.status & STATUS_SENSOR_ALARM)

    @property
    def pulse_quality(self) -> PulseQuality:
        red = bool(self.status & STATUS_RED_PERFUSION)
        green = bool(self.status & STATUS_GREEN_PERFUSION)
        if red and green:
            return PulseQuality.YELLOW
        if red:
            return PulseQuality.RED
        if green:
            return PulseQuality.GREEN
        return PulseQuality.OUTSIDE_PULSE
