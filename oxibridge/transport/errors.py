# oxibridge/transport/errors.py
from __future__ import annotations


class TransportError(Exception):
    """Base class for transport-layer failures."""


class TransportOpenError(TransportError):
    """The device endpoint could not be opened (missing tty, busy, no permission)."""


class TransportIOError(TransportError):
    """Read/write failed on an open endpoint; the link is treated as lost."""
