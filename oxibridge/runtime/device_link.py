# oxibridge/runtime/device_link.py
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from oxibridge.core.errors import DeviceConnectError, DeviceDisconnectedError
from oxibridge.protocol.commands import DataMode, set_data_format
from oxibridge.protocol.packet import NoninPacket
from oxibridge.protocol.parser import PacketParser
from oxibridge.runtime.rx_worker import RxWorker
from oxibridge.transport.base import Transport
from oxibridge.transport.errors import TransportError, TransportOpenError


@dataclass
class NoninLink:
    """
    Host/device link to one Nonin oximeter.

    Responsibilities:
      - open/close the underlying transport
      - switch the device to the configured serial data format
      - run the RX thread feeding the packet parser
      - report complete packets via on_packet, link loss via on_disconnect
      - translate low-level failures into operator-safe errors
    """

    transport: Transport
    data_mode: DataMode = DataMode.D7
    read_size: int = 64
    logger: Optional[logging.Logger] = None
    on_packet: Optional[Callable[[NoninPacket], None]] = None
    on_disconnect: Optional[Callable[[DeviceDisconnectedError], None]] = None

    def __post_init__(self) -> None:
        self._log = self.logger or logging.getLogger(__name__)
        self.parser = PacketParser(logger=self._log)
        self._worker: Optional[RxWorker] = None
        self._lock = threading.Lock()

    @property
    def is_started(self) -> bool:
        return self._worker is not None

    def start(self) -> None:
        with self._lock:
            if self._worker is not None:
                return

            name = self.transport.describe()
            try:
                self.transport.open()
            except TransportOpenError as e:
                self._log.warning("TRANSPORT_OPEN_FAILED transport=%s err=%s", name, e)
                raise DeviceConnectError(
                    "Could not open device transport.",
                    hint=str(e),
                    details={"transport": name},
                ) from None
            except TransportError as e:
                self._log.warning("TRANSPORT_OPEN_ERROR transport=%s err=%s", name, e)
                raise DeviceConnectError(
                    "Transport error while opening device.",
                    hint=str(e),
                    details={"transport": name},
                ) from None

            try:
                self.transport.write(set_data_format(self.data_mode))
                self.transport.flush()
            except TransportError as e:
                self._log.warning("DATA_MODE_WRITE_FAILED transport=%s err=%s", name, e)
                self._close_transport()
                raise DeviceConnectError(
                    f"Could not switch device to data format {self.data_mode.name}.",
                    hint=str(e),
                    details={"transport": name, "data_mode": self.data_mode.name},
                ) from None

            self._log.info("LINK_STARTED transport=%s data_mode=%s", name, self.data_mode.name)
            self.parser.reset()
            self._worker = RxWorker(self)
            self._worker.start()

    def stop(self) -> None:
        with self._lock:
            worker, self._worker = self._worker, None
        if worker is None:
            return

        worker.stop()
        if threading.current_thread() is not worker:
            worker.join(timeout=1.0)
        self._close_transport()
        self._log.info("LINK_STOPPED transport=%s", self.transport.describe())

    def _close_transport(self) -> None:
        try:
            self.transport.close()
        except Exception:
            self._log.exception("Failed to close transport")

    # ---------------- RX thread hooks ----------------
    def _pump_rx(self) -> None:
        data = self.transport.read(self.read_size)
        if not data:
            return
        self.parser.feed(data)
        for packet in self.parser.drain():
            cb = self.on_packet
            if cb is None:
                continue
            try:
                cb(packet)
            except Exception:
                self._log.exception("PACKET_CALLBACK_ERROR")

    def _on_rx_lost(self, err: Exception) -> None:
        self._log.warning("LINK_LOST transport=%s err=%s", self.transport.describe(), err)
        with self._lock:
            self._worker = None
        self._close_transport()

        cb = self.on_disconnect
        if cb is not None:
            cb(
                DeviceDisconnectedError(
                    "Connection to the device was lost.",
                    hint=str(err),
                    details={"transport": self.transport.describe()},
                )
            )

    def __enter__(self) -> "NoninLink":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()
