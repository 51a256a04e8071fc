# oxibridge/runtime/rx_worker.py
from __future__ import annotations

import threading
from typing import TYPE_CHECKING

from oxibridge.transport.errors import TransportIOError

if TYPE_CHECKING:
    from oxibridge.runtime.device_link import NoninLink


class RxWorker(threading.Thread):
    """Thread that continuously reads from the transport and feeds the NoninLink."""

    def __init__(self, link: "NoninLink"):
        super().__init__(daemon=True, name="nonin-rx")
        self.link = link
        self._stop_event = threading.Event()

    @property
    def stopping(self) -> bool:
        return self._stop_event.is_set()

    def run(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.link._pump_rx()
            except TransportIOError as e:
                if not self._stop_event.is_set():
                    self.link._on_rx_lost(e)
                return
            except Exception:
                self.link._log.exception(
                    "RX_WORKER_EXCEPTION buffered=%d",
                    len(self.link.parser.buffer),
                )
                self._stop_event.wait(0.01)
            else:
                self._stop_event.wait(0.001)

    def stop(self) -> None:
        self._stop_event.set()
