# oxibridge/core/errors.py
from __future__ import annotations


class OxiBridgeError(Exception):
    """
    Base class for all expected operational errors in oxibridge.
    """

    #: Stable machine-readable identifier (for CLI exit mapping, host shells, etc.)
    code: str = "unknown"

    def __init__(
        self,
        message: str,
        *,
        hint: str | None = None,
        details: dict | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.details = details or {}

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Configuration / setup errors (no device access yet)
# ---------------------------------------------------------------------------

class ConfigError(OxiBridgeError):
    """
    Configuration is missing, malformed or inconsistent.

    Examples:
      - config file not found / not valid YAML
      - unknown bridge variant
      - unknown data mode or transport driver
      - malformed device table
    """
    code = "config_error"


# ---------------------------------------------------------------------------
# Device lifecycle errors
# ---------------------------------------------------------------------------

class DeviceConnectError(OxiBridgeError):
    """
    Transport to the oximeter could not be opened or initialized.

    Examples:
      - RFCOMM serial device not present
      - permission denied on the tty
      - data-format command could not be written
    """
    code = "device_connect_error"


class DeviceDisconnectedError(OxiBridgeError):
    """
    Device was connected but is no longer reachable.
    """
    code = "device_disconnected"


# ---------------------------------------------------------------------------
# Bridge call errors (raised by blocking helpers, never by the bridges)
# ---------------------------------------------------------------------------

class BridgeOperationError(OxiBridgeError):
    """
    A bridge operation reported an error reason through its error continuation.

    The opaque reason is kept verbatim in ``details["reason"]``.
    """
    code = "bridge_operation_error"


class BridgeTimeoutError(OxiBridgeError):
    """
    A bridge operation did not invoke either continuation in time.
    """
    code = "bridge_timeout"
