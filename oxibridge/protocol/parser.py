# oxibridge/protocol/parser.py
from __future__ import annotations

import logging
from typing import List, Optional

from .frame import FRAME_SIZE, NoninFrame, is_sync_frame, is_valid_frame
from .packet import NoninPacket


class PacketParser:
    """
    Incremental parser turning a raw Nonin byte stream into packets.

    Scans a 5-byte window: invalid windows drop one byte (resync), valid
    frames consume five. Frames seen before the first sync frame of a packet
    are discarded.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.buffer = bytearray()
        self._packet: Optional[NoninPacket] = None
        self._log = logger or logging.getLogger(__name__)
        self.dropped_bytes = 0

    # ---------------- Public API ----------------
    def feed(self, data: bytes) -> None:
        """Feed raw bytes into the parser buffer."""
        self.buffer.extend(data)
        self._log.debug(
            "Parser fed %d bytes, buffer_len=%d",
            len(data),
            len(self.buffer),
        )

    def get_packet(self) -> Optional[NoninPacket]:
        """Parse and return the next complete packet, if available."""
        while len(self.buffer) >= FRAME_SIZE:
            window = bytes(self.buffer[:FRAME_SIZE])
            if not is_valid_frame(window):
                del self.buffer[:1]
                self.dropped_bytes += 1
                continue

            del self.buffer[:FRAME_SIZE]

            if is_sync_frame(window):
                if self._packet is not None and self._packet.frame_count:
                    self._log.debug(
                        "Sync before packet complete, discarding %d frames",
                        self._packet.frame_count,
                    )
                self._packet = NoninPacket()

            if self._packet is None:
                continue  # waiting for sync

            self._packet.add_frame(NoninFrame.from_bytes(window))
            if self._packet.is_full:
                packet, self._packet = self._packet, None
                self._log.debug("Parsed %r", packet)
                return packet

        return None

    def drain(self) -> List[NoninPacket]:
        """Return every complete packet currently parseable."""
        out: List[NoninPacket] = []
        while True:
            p = self.get_packet()
            if p is None:
                return out
            out.append(p)

    def reset(self) -> None:
        self.buffer.clear()
        self._packet = None
        self.dropped_bytes = 0
