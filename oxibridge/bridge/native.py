# oxibridge/bridge/native.py
from __future__ import annotations

import logging
import threading
from typing import Any, Optional, Sequence

from oxibridge.interfaces.bridge import (
    ACTION_IS_BLUETOOTH_ENABLED,
    ACTION_IS_PAIRED,
    ACTION_REQUEST_BLUETOOTH_ENABLE,
    ACTION_REQUEST_PERMISSIONS,
    ACTION_START,
    ACTION_STOP,
    Bridge,
    ErrorCallback,
    ReadingCallback,
    SuccessCallback,
)
from oxibridge.interfaces.native_invoker import NativeInvoker

DEFAULT_SERVICE = "Nonin"


class DeviceBridge(Bridge):
    """
    Forwarding facade: each operation is exactly one invoker.exec() call.

    Payloads and error reasons are passed through untouched. The only state
    kept here is whether a streaming session is believed to be running.
    """

    def __init__(
        self,
        invoker: NativeInvoker,
        *,
        service: str = DEFAULT_SERVICE,
        logger: Optional[logging.Logger] = None,
    ):
        self._invoker = invoker
        self._service = service
        self._log = logger or logging.getLogger(__name__)

        self._lock = threading.Lock()
        self._session = 0       # bumped by every start/stop
        self._started = False

    @property
    def service(self) -> str:
        return self._service

    @property
    def is_started(self) -> bool:
        with self._lock:
            return self._started

    def request_permissions(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        self._exec(ACTION_REQUEST_PERMISSIONS, [], on_success, on_error)

    def is_bluetooth_enabled(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        self._exec(ACTION_IS_BLUETOOTH_ENABLED, [], on_success, on_error)

    def request_bluetooth_enable(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        self._exec(ACTION_REQUEST_BLUETOOTH_ENABLE, [], on_success, on_error)

    def is_paired(
        self,
        address: str,
        on_success: SuccessCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        self._exec(ACTION_IS_PAIRED, [address], on_success, on_error)

    def start(
        self,
        address: str,
        on_success: ReadingCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None:
        with self._lock:
            self._session += 1
            session = self._session
            self._started = True

        def _session_error(reason: str) -> None:
            with self._lock:
                if self._session == session:
                    self._started = False
            self._deliver_error(ACTION_START, reason, on_error)

        self._log.info("SESSION_START address=%s service=%s", address, self._service)
        self._invoker.exec(on_success, _session_error, self._service, ACTION_START, [address])

    def stop(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None:
        with self._lock:
            self._session += 1
            self._started = False

        self._log.info("SESSION_STOP service=%s", self._service)
        self._exec(ACTION_STOP, [], on_success, on_error)

    def _exec(
        self,
        action: str,
        args: Sequence[Any],
        on_success: SuccessCallback,
        on_error: Optional[ErrorCallback],
    ) -> None:
        self._log.debug("NATIVE_EXEC service=%s action=%s args=%s", self._service, action, list(args))
        self._invoker.exec(
            on_success,
            lambda reason: self._deliver_error(action, reason, on_error),
            self._service,
            action,
            list(args),
        )

    def _deliver_error(self, action: str, reason: str, on_error: Optional[ErrorCallback]) -> None:
        if on_error is None:
            self._log.warning("NATIVE_ERROR_UNHANDLED action=%s reason=%s", action, reason)
            return
        on_error(reason)
