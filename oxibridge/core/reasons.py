# oxibridge/core/reasons.py
"""
Opaque error reasons surfaced through a bridge's error continuation.

These are plain strings on purpose: the bridge facade forwards whatever the
native side reports, so consumers compare against these values but must also
accept reasons not listed here.
"""

from __future__ import annotations

PERMISSION_DENIED = "PermissionDenied"
BLUETOOTH_DISABLED = "BluetoothDisabled"
BLUETOOTH_ENABLE_DECLINED = "BluetoothEnableDeclined"
DEVICE_NOT_PAIRED = "DeviceNotPaired"
CONNECTION_LOST = "ConnectionLost"
CONNECT_FAILED = "ConnectFailed"
INVALID_ADDRESS = "InvalidAddress"
INVALID_ACTION = "InvalidAction"

ALL_REASONS = frozenset(
    {
        PERMISSION_DENIED,
        BLUETOOTH_DISABLED,
        BLUETOOTH_ENABLE_DECLINED,
        DEVICE_NOT_PAIRED,
        CONNECTION_LOST,
        CONNECT_FAILED,
        INVALID_ADDRESS,
        INVALID_ACTION,
    }
)
