# oxibridge/protocol/commands.py
from __future__ import annotations

from enum import Enum

STX = 0x02
ETX = 0x03
OP_SET_DATA_FORMAT = 0x70
DATA_SIZE = 0x02
DATA_TYPE = 0x02


class DataMode(Enum):
    """Serial data formats the oximeter can be switched to."""
    D2 = 0x02
    D7 = 0x07
    D8 = 0x08
    D13 = 0x0D

    @classmethod
    def parse(cls, name: str) -> "DataMode":
        try:
            return cls[str(name).strip().upper()]
        except KeyError:
            raise ValueError(
                f"Unknown data mode '{name}' (valid: {', '.join(m.name for m in cls)})"
            ) from None


def set_data_format(mode: DataMode) -> bytes:
    """Build the 6-byte 'set data format' command."""
    return bytes([STX, OP_SET_DATA_FORMAT, DATA_SIZE, DATA_TYPE, mode.value, ETX])
