# oxibridge/app/calls.py
from __future__ import annotations

import threading
from typing import Any, Callable

from oxibridge.core.errors import BridgeOperationError, BridgeTimeoutError


def call_blocking(op: Callable[..., None], *args: Any, timeout_s: float = 10.0) -> Any:
    """
    Run a one-shot bridge operation and wait for its continuation.

    Returns the success payload, raises BridgeOperationError with the opaque
    reason on error, BridgeTimeoutError if neither continuation fires.
    Not for start(), whose success continuation repeats.
    """
    done = threading.Event()
    result: dict = {}

    def _ok(payload: Any = None) -> None:
        result.setdefault("ok", payload)
        done.set()

    def _err(reason: str) -> None:
        result.setdefault("err", reason)
        done.set()

    name = getattr(op, "__name__", "operation")
    op(*args, _ok, _err)

    if not done.wait(timeout_s):
        raise BridgeTimeoutError(
            f"{name} did not complete within {timeout_s:.1f}s.",
            details={"operation": name},
        )
    if "err" in result:
        raise BridgeOperationError(
            f"{name} failed: {result['err']}",
            details={"operation": name, "reason": result["err"]},
        )
    return result["ok"]
