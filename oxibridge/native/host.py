# oxibridge/native/host.py
from __future__ import annotations

import re
from typing import Dict, Iterable, Mapping, Optional, Protocol

MAC_RE = re.compile(r"^[0-9A-Fa-f]{2}(:[0-9A-Fa-f]{2}){5}$")


def is_valid_address(address: object) -> bool:
    return isinstance(address, str) and bool(MAC_RE.match(address))


def normalize_address(address: str) -> str:
    return address.strip().upper()


class BluetoothHost(Protocol):
    """
    OS-side Bluetooth services the plugin depends on.

    Permission prompts, adapter power prompts and pairing are owned by the
    platform; the plugin only asks.
    """

    def has_permissions(self) -> bool: ...
    def request_permissions(self) -> bool: ...
    def is_enabled(self) -> bool: ...
    def request_enable(self) -> bool: ...
    def bonded_addresses(self) -> Iterable[str]: ...
    def serial_port_for(self, address: str) -> Optional[str]: ...


class StaticBluetoothHost:
    """
    BluetoothHost backed by configuration.

    For machines where pairing and RFCOMM binding are done up front (bluetoothctl
    + rfcomm bind, or a Windows outgoing COM port): each bonded oximeter maps to
    the serial device the OS exposes for it. Prompts cannot be shown, so
    request_enable() just reports the configured adapter state.
    """

    def __init__(
        self,
        devices: Optional[Mapping[str, str]] = None,
        *,
        adapter_enabled: bool = True,
        permissions_granted: bool = True,
    ):
        self._devices: Dict[str, str] = {
            normalize_address(addr): str(port) for addr, port in (devices or {}).items()
        }
        self.adapter_enabled = bool(adapter_enabled)
        self.permissions_granted = bool(permissions_granted)

    def has_permissions(self) -> bool:
        return self.permissions_granted

    def request_permissions(self) -> bool:
        return self.permissions_granted

    def is_enabled(self) -> bool:
        return self.adapter_enabled

    def request_enable(self) -> bool:
        return self.adapter_enabled

    def bonded_addresses(self) -> Iterable[str]:
        # bonded devices are only visible with the adapter on
        if not self.adapter_enabled:
            return []
        return list(self._devices)

    def serial_port_for(self, address: str) -> Optional[str]:
        return self._devices.get(normalize_address(address))
