# protocol/__init__.py

from .commands import DataMode, set_data_format
from .frame import NoninFrame, PulseQuality, is_sync_frame, is_valid_frame
from .packet import FRAMES_PER_PACKET, INVALID_DATA, MISSING_HR, MISSING_SPO2, NoninPacket
from .parser import PacketParser

__all__ = [
    "DataMode", "set_data_format",
    "NoninFrame", "PulseQuality", "is_sync_frame", "is_valid_frame",
    "NoninPacket", "FRAMES_PER_PACKET", "INVALID_DATA", "MISSING_HR", "MISSING_SPO2",
    "PacketParser",
]
