# oxibridge/interfaces/bridge.py
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Optional

from oxibridge.model.reading import Reading

SuccessCallback = Callable[[Any], None]
ErrorCallback = Callable[[str], None]       # opaque reason
ReadingCallback = Callable[[Reading], None]

# Cross-boundary action names
ACTION_REQUEST_PERMISSIONS = "askPermissions"
ACTION_IS_BLUETOOTH_ENABLED = "isBTON"
ACTION_REQUEST_BLUETOOTH_ENABLE = "askBTON"
ACTION_IS_PAIRED = "isPaired"
ACTION_START = "start"
ACTION_STOP = "stop"


class Bridge(ABC):
    """
    Oximeter bridge: the operation surface seen by the application shell.

    Contract:
      - every operation reports through exactly one of its continuations,
        except start(), whose on_success fires once per Reading for the
        whole session
      - on_error receives an opaque reason string (see oxibridge.core.reasons)
      - start() while started replaces the running session; stop() is
        idempotent
    """

    @property
    @abstractmethod
    def is_started(self) -> bool: ...

    @abstractmethod
    def request_permissions(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None: ...

    @abstractmethod
    def is_bluetooth_enabled(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None: ...

    @abstractmethod
    def request_bluetooth_enable(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None: ...

    @abstractmethod
    def is_paired(
        self,
        address: str,
        on_success: SuccessCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None: ...

    @abstractmethod
    def start(
        self,
        address: str,
        on_success: ReadingCallback,
        on_error: Optional[ErrorCallback] = None,
    ) -> None: ...

    @abstractmethod
    def stop(
        self, on_success: SuccessCallback, on_error: Optional[ErrorCallback] = None
    ) -> None: ...
