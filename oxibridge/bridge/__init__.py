from .mock import MockDeviceBridge, TICK_INTERVAL_S
from .native import DeviceBridge

__all__ = ["DeviceBridge", "MockDeviceBridge", "TICK_INTERVAL_S"]
