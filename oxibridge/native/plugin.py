# oxibridge/native/plugin.py
from __future__ import annotations

import logging
import threading
import time
from typing import Any, Callable, Dict, Optional, Sequence

from oxibridge.core import reasons
from oxibridge.core.errors import DeviceConnectError, DeviceDisconnectedError
from oxibridge.interfaces.bridge import (
    ACTION_IS_BLUETOOTH_ENABLED,
    ACTION_IS_PAIRED,
    ACTION_REQUEST_BLUETOOTH_ENABLE,
    ACTION_REQUEST_PERMISSIONS,
    ACTION_START,
    ACTION_STOP,
)
from oxibridge.model.reading import Reading
from oxibridge.native.host import BluetoothHost, is_valid_address, normalize_address
from oxibridge.protocol.commands import DataMode
from oxibridge.protocol.packet import NoninPacket
from oxibridge.runtime.device_link import NoninLink
from oxibridge.transport.base import Transport
from oxibridge.transport.errors import TransportError
from oxibridge.transport.serial_port import SerialTransport

Success = Callable[[Any], None]
Error = Callable[[str], None]
TransportFactory = Callable[[str], Transport]  # serial port path -> unopened transport


class _StreamSession:
    """One start() call: a link plus the continuations it reports to."""

    def __init__(self, address: str, link: NoninLink, on_success: Success, on_error: Error):
        self.address = address
        self.link = link
        self._on_success = on_success
        self._on_error = on_error
        self._lock = threading.Lock()
        self._active = True
        self._last_ts = 0

    @property
    def is_active(self) -> bool:
        with self._lock:
            return self._active

    def deliver(self, packet: NoninPacket) -> None:
        with self._lock:
            if not self._active:
                return
            self._last_ts = max(self._last_ts, int(time.time() * 1000))
            ts = self._last_ts
        self._on_success(Reading.from_packet(packet, ts))

    def fail(self, reason: str) -> bool:
        """Report reason once and deactivate; False if already inactive."""
        with self._lock:
            if not self._active:
                return False
            self._active = False
        self._on_error(reason)
        return True

    def close(self) -> None:
        with self._lock:
            self._active = False
        self.link.stop()


class NoninPlugin:
    """
    NativeInvoker for Nonin oximeters reachable through a serial endpoint.

    Dispatches the bridge action names (case-insensitive) and reports every
    outcome through the continuations, never by raising. Readings are
    delivered from the link's RX thread.
    """

    def __init__(
        self,
        host: BluetoothHost,
        *,
        service: str = "Nonin",
        transport_factory: Optional[TransportFactory] = None,
        data_mode: DataMode = DataMode.D7,
        logger: Optional[logging.Logger] = None,
    ):
        self._host = host
        self._service = service
        self._transport_factory = transport_factory or SerialTransport
        self._data_mode = data_mode
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._session: Optional[_StreamSession] = None

        self._actions: Dict[str, Callable[[Sequence[Any], Success, Error], None]] = {
            ACTION_REQUEST_PERMISSIONS.lower(): self._ask_permissions,
            ACTION_IS_BLUETOOTH_ENABLED.lower(): self._is_bt_on,
            ACTION_REQUEST_BLUETOOTH_ENABLE.lower(): self._ask_bt_on,
            ACTION_IS_PAIRED.lower(): self._is_paired,
            ACTION_START.lower(): self._start,
            ACTION_STOP.lower(): self._stop,
        }

    @property
    def service(self) -> str:
        return self._service

    @property
    def active_address(self) -> Optional[str]:
        with self._lock:
            return self._session.address if self._session else None

    def exec(
        self,
        on_success: Success,
        on_error: Error,
        service: str,
        action: str,
        args: Sequence[Any],
    ) -> None:
        handler = self._actions.get(str(action).lower()) if service == self._service else None
        if handler is None:
            self._log.warning("UNSUPPORTED_ACTION service=%s action=%s", service, action)
            on_error(reasons.INVALID_ACTION)
            return
        handler(list(args), on_success, on_error)

    # ---------------- actions ----------------
    def _ask_permissions(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        if self._host.has_permissions() or self._host.request_permissions():
            on_success(None)
            return
        self._log.warning("PERMISSIONS_DENIED")
        on_error(reasons.PERMISSION_DENIED)

    def _is_bt_on(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        on_success(bool(self._host.is_enabled()))

    def _ask_bt_on(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        if self._host.request_enable():
            on_success(True)
            return
        self._log.warning("BLUETOOTH_ENABLE_DECLINED")
        on_error(reasons.BLUETOOTH_ENABLE_DECLINED)

    def _is_paired(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        address = self._address_arg(args)
        if address is None:
            on_error(reasons.INVALID_ADDRESS)
            return
        on_success(self._is_bonded(address))

    def _start(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        address = self._address_arg(args)
        if address is None:
            on_error(reasons.INVALID_ADDRESS)
            return
        if not self._host.is_enabled():
            on_error(reasons.BLUETOOTH_DISABLED)
            return

        port = self._host.serial_port_for(address) if self._is_bonded(address) else None
        if port is None:
            self._log.warning("DEVICE_NOT_PAIRED address=%s", address)
            on_error(reasons.DEVICE_NOT_PAIRED)
            return

        self._close_session()

        try:
            transport = self._transport_factory(port)
        except (TransportError, TypeError, ValueError) as e:
            self._log.error("TRANSPORT_CREATE_FAILED port=%s err=%s", port, e)
            on_error(reasons.CONNECT_FAILED)
            return

        link = NoninLink(transport=transport, data_mode=self._data_mode, logger=self._log)
        session = _StreamSession(address, link, on_success, on_error)
        link.on_packet = session.deliver
        link.on_disconnect = lambda err: self._on_link_lost(session, err)

        try:
            link.start()
        except DeviceConnectError as e:
            self._log.warning("CONNECT_FAILED address=%s port=%s hint=%s", address, port, e.hint)
            session.fail(reasons.CONNECT_FAILED)
            return
        except Exception:
            self._log.exception("CONNECT_ERROR address=%s port=%s", address, port)
            self._discard(transport)
            session.fail(reasons.CONNECT_FAILED)
            return

        # the link may already have dropped between start() and here
        with self._lock:
            installed = session.is_active
            if installed:
                self._session = session
        if installed:
            self._log.info("SESSION_START address=%s port=%s", address, port)

    def _stop(self, args: Sequence[Any], on_success: Success, on_error: Error) -> None:
        self._close_session()
        on_success(None)

    # ---------------- helpers ----------------
    def _close_session(self) -> None:
        with self._lock:
            session, self._session = self._session, None
        if session is not None:
            self._log.info("SESSION_STOP address=%s", session.address)
            session.close()

    def _discard(self, transport: Transport) -> None:
        try:
            transport.close()
        except Exception:
            self._log.exception("Failed to close transport")

    def _on_link_lost(self, session: _StreamSession, err: DeviceDisconnectedError) -> None:
        with self._lock:
            if self._session is session:
                self._session = None
        if session.fail(reasons.CONNECTION_LOST):
            self._log.warning("SESSION_LOST address=%s hint=%s", session.address, err.hint)

    def _is_bonded(self, address: str) -> bool:
        target = normalize_address(address)
        return any(normalize_address(a) == target for a in self._host.bonded_addresses())

    def _address_arg(self, args: Sequence[Any]) -> Optional[str]:
        address = args[0] if args else None
        if not is_valid_address(address):
            self._log.error("INVALID_ADDRESS value=%r", address)
            return None
        return normalize_address(address)
