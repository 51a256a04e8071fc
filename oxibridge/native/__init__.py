from .host import BluetoothHost, StaticBluetoothHost, is_valid_address
from .plugin import NoninPlugin

__all__ = ["BluetoothHost", "StaticBluetoothHost", "is_valid_address", "NoninPlugin"]
