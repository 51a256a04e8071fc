# oxibridge/model/reading.py
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Dict, Optional, Tuple

if TYPE_CHECKING:
    from oxibridge.protocol.packet import NoninPacket


@dataclass(frozen=True, slots=True)
class Reading:
    """
    One oximeter sample as delivered to the application shell.

    The seven core fields are always present. The extended fields are only
    filled on the native path (decoded from a full device packet) and are
    omitted from as_dict() when not set.
    """
    timestamp: int  # epoch ms
    spo2: int
    hr: int
    has_artifacts: bool = False
    has_sustained_artifacts: bool = False
    nofinger: bool = False
    batterylow: bool = False

    instant_spo2: Optional[int] = None
    timer: Optional[int] = None
    sensor_alarm: Optional[bool] = None
    smart_point: Optional[bool] = None
    ppg: Optional[Tuple[int, ...]] = None

    @classmethod
    def from_packet(cls, packet: "NoninPacket", timestamp_ms: int) -> "Reading":
        return cls(
            timestamp=int(timestamp_ms),
            spo2=packet.spo2_average,
            hr=packet.hr_average,
            has_artifacts=packet.has_any_artifact,
            has_sustained_artifacts=packet.has_any_out_of_track,
            nofinger=packet.has_any_sensor_alarm,
            batterylow=packet.is_battery_low,
            instant_spo2=packet.beat_to_beat_spo2,
            timer=packet.timer,
            sensor_alarm=packet.has_any_sensor_alarm,
            smart_point=packet.is_smart_point,
            ppg=packet.pleth_samples,
        )

    def as_dict(self) -> Dict[str, Any]:
        d: Dict[str, Any] = {
            "timestamp": self.timestamp,
            "spo2": self.spo2,
            "hr": self.hr,
            "hasArtifacts": self.has_artifacts,
            "hasSustainedArtifacts": self.has_sustained_artifacts,
            "nofinger": self.nofinger,
            "batterylow": self.batterylow,
        }
        if self.instant_spo2 is not None:
            d["instantSpo2"] = self.instant_spo2
        if self.timer is not None:
            d["timer"] = self.timer
        if self.sensor_alarm is not None:
            d["sensorAlarm"] = self.sensor_alarm
        if self.smart_point is not None:
            d["smartPoint"] = self.smart_point
        if self.ppg is not None:
            d["PPG"] = list(self.ppg)
        return d
