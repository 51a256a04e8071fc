# oxibridge/transport/serial_port.py
from __future__ import annotations

from typing import Optional

import serial
from serial import SerialException

from .base import Transport
from .errors import TransportIOError, TransportOpenError


class SerialTransport(Transport):
    """
    Serial transport implemented via pyserial.

    Used for oximeters the OS exposes as a serial device (e.g. an RFCOMM-bound
    /dev/rfcomm0 or a Windows outgoing Bluetooth COM port).

    read(n) attempts to read up to n bytes and may return fewer due to timeout.
    """

    def __init__(self, port: str, baudrate: int = 9600, timeout: float = 0.1):
        self.port = port
        self.baudrate = baudrate
        self.timeout = timeout
        self.ser: Optional[serial.Serial] = None

    def open(self) -> None:
        try:
            self.ser = serial.Serial(
                self.port,
                baudrate=self.baudrate,
                timeout=self.timeout,
                write_timeout=self.timeout,
            )
            self.ser.reset_input_buffer()
        except (SerialException, ValueError) as e:
            # pyserial raises ValueError for out-of-range settings
            self.ser = None
            raise TransportOpenError(str(e)) from None

    def close(self) -> None:
        if self.ser is not None:
            try:
                self.ser.close()
            finally:
                self.ser = None

    def describe(self) -> str:
        return f"serial:{self.port}@{self.baudrate}"

    def is_open(self) -> bool:
        return self.ser is not None and self.ser.is_open

    def read(self, n: int) -> bytes:
        if self.ser is None:
            raise TransportIOError("read while transport not open")

        try:
            return self.ser.read(n)
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"Serial read failed: {e}") from None

    def write(self, data: bytes) -> int:
        if self.ser is None:
            raise TransportIOError("write while transport not open")

        try:
            return self.ser.write(data)
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"Serial write failed: {e}") from None

    def flush(self) -> None:
        if self.ser is None:
            raise TransportIOError("flush while transport not open")

        try:
            self.ser.flush()
        except SerialException as e:
            self.ser = None
            raise TransportIOError(f"Serial flush failed: {e}") from None
