# oxibridge/protocol/packet.py
from __future__ import annotations

from typing import List, Optional, Tuple

from .frame import NoninFrame

FRAMES_PER_PACKET = 25

INVALID_DATA = -1

# Values the device sends when it has no measurement
MISSING_HR = 511
MISSING_SPO2 = 127

HR_MSB_MASK = 0x03
HR_LSB_MASK = 0x7F
TIMER_MASK = 0x7F

STAT2_BATTERY_LOW = 0x01
STAT2_SMART_POINT = 0x20


class FrameIndex:
    """Position of each value-carrying frame inside a packet."""
    HR_MSB = 0
    HR_LSB = 1
    SPO2 = 2
    SOFTWARE_REVISION = 3
    TIMER_MSB = 5
    TIMER_LSB = 6
    STAT2 = 7
    SPO2_DISPLAY = 8
    SPO2_FAST = 9
    SPO2_BEAT_TO_BEAT = 10
    EXT_HR_MSB = 13
    EXT_HR_LSB = 14
    EXT_SPO2 = 15
    EXT_SPO2_DISPLAY = 16
    HR_MSB_DISPLAY = 19
    HR_LSB_DISPLAY = 20
    EXT_HR_MSB_DISPLAY = 21
    EXT_HR_LSB_DISPLAY = 22


class NoninPacket:
    """
    A group of 25 frames starting at a sync frame (~1/3 s of data).

    Byte 4 ("extra") of each frame carries a different value depending on
    the frame's position; see FrameIndex. Accessors return INVALID_DATA for
    values whose frames have not been received yet.
    """

    def __init__(self, frames: Optional[List[NoninFrame]] = None):
        self._frames: List[NoninFrame] = []
        self._any_artifact = False
        self._any_out_of_track = False
        self._any_sensor_alarm = False
        for f in frames or ():
            self.add_frame(f)

    # ---------------- assembly ----------------
    @property
    def is_full(self) -> bool:
        return len(self._frames) == FRAMES_PER_PACKET

    @property
    def frame_count(self) -> int:
        return len(self._frames)

    @property
    def frames(self) -> Tuple[NoninFrame, ...]:
        return tuple(self._frames)

    def add_frame(self, frame: NoninFrame) -> bool:
        """Append a frame; returns False if the packet is already full."""
        if self.is_full:
            return False
        self._frames.append(frame)
        self._any_artifact |= frame.has_artifact
        self._any_out_of_track |= frame.is_out_of_track
        self._any_sensor_alarm |= frame.has_sensor_alarm
        return True

    def clear(self) -> None:
        self._frames.clear()
        self._any_artifact = False
        self._any_out_of_track = False
        self._any_sensor_alarm = False

    # ---------------- aggregate flags ----------------
    @property
    def has_any_artifact(self) -> bool:
        return self._any_artifact

    @property
    def has_any_out_of_track(self) -> bool:
        return self._any_out_of_track

    @property
    def has_any_sensor_alarm(self) -> bool:
        return self._any_sensor_alarm

    # ---------------- values ----------------
    def _byte(self, idx: int) -> int:
        if idx >= len(self._frames):
            return INVALID_DATA
        return self._frames[idx].extra

    def _heart_rate(self, msb_idx: int, lsb_idx: int) -> int:
        if max(msb_idx, lsb_idx) >= len(self._frames):
            return INVALID_DATA
        msb = self._frames[msb_idx].extra & HR_MSB_MASK
        lsb = self._frames[lsb_idx].extra & HR_LSB_MASK
        return (msb << 7) | lsb

    @property
    def hr_average(self) -> int:
        """4-beat average, formatted for recording."""
        return self._heart_rate(FrameIndex.HR_MSB, FrameIndex.HR_LSB)

    @property
    def hr_extended_average(self) -> int:
        return self._heart_rate(FrameIndex.EXT_HR_MSB, FrameIndex.EXT_HR_LSB)

    @property
    def hr_display_average(self) -> int:
        return self._heart_rate(FrameIndex.HR_MSB_DISPLAY, FrameIndex.HR_LSB_DISPLAY)

    @property
    def hr_extended_display_average(self) -> int:
        return self._heart_rate(FrameIndex.EXT_HR_MSB_DISPLAY, FrameIndex.EXT_HR_LSB_DISPLAY)

    @property
    def spo2_average(self) -> int:
        """4-beat average, formatted for recording."""
        return self._byte(FrameIndex.SPO2)

    @property
    def spo2_fast_average(self) -> int:
        return self._byte(FrameIndex.SPO2_FAST)

    @property
    def beat_to_beat_spo2(self) -> int:
        return self._byte(FrameIndex.SPO2_BEAT_TO_BEAT)

    @property
    def spo2_extended_average(self) -> int:
        return self._byte(FrameIndex.EXT_SPO2)

    @property
    def spo2_display_average(self) -> int:
        return self._byte(FrameIndex.SPO2_DISPLAY)

    @property
    def spo2_extended_display_average(self) -> int:
        return self._byte(FrameIndex.EXT_SPO2_DISPLAY)

    @property
    def firmware_revision(self) -> int:
        return self._byte(FrameIndex.SOFTWARE_REVISION)

    @property
    def timer(self) -> int:
        """14-bit 3 Hz device timer."""
        if FrameIndex.TIMER_LSB >= len(self._frames):
            return INVALID_DATA
        msb = self._frames[FrameIndex.TIMER_MSB].extra & TIMER_MASK
        lsb = self._frames[FrameIndex.TIMER_LSB].extra & TIMER_MASK
        return (msb << 7) | lsb

    @property
    def is_battery_low(self) -> bool:
        stat2 = self._byte(FrameIndex.STAT2)
        return stat2 != INVALID_DATA and bool(stat2 & STAT2_BATTERY_LOW)

    @property
    def is_smart_point(self) -> bool:
        stat2 = self._byte(FrameIndex.STAT2)
        return stat2 != INVALID_DATA and bool(stat2 & STAT2_SMART_POINT)

    @property
    def pleth_samples(self) -> Tuple[int, ...]:
        return tuple(f.pleth for f in self._frames)

    def __repr__(self) -> str:
        return (
            f"NoninPacket(frames={len(self._frames)}, spo2={self.spo2_average}, "
            f"hr={self.hr_average})"
        )
