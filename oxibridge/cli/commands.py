# oxibridge/cli/commands.py
from __future__ import annotations

import dataclasses
import json
import logging
import threading
import time
from pathlib import Path
from typing import Optional

from oxibridge.app.calls import call_blocking
from oxibridge.app.config import VARIANT_MOCK, BridgeConfig, load_config
from oxibridge.app.factory import create_bridge
from oxibridge.core.errors import BridgeOperationError
from oxibridge.interfaces import Bridge, ReadingSink
from oxibridge.model import Reading


# ---------------- Reading sink ----------------

class PrintReadingSink(ReadingSink):
    """Print readings to stdout."""
    def __init__(self, *, as_json: bool = False):
        self._as_json = as_json
        self.count = 0

    def on_reading(self, reading: Reading) -> None:
        self.count += 1
        d = reading.as_dict()
        if self._as_json:
            print(json.dumps(d), flush=True)
            return
        flags = [k for k in ("hasArtifacts", "hasSustainedArtifacts", "nofinger", "batterylow") if d[k]]
        print(
            f"READING ts={d['timestamp']} spo2={d['spo2']} hr={d['hr']}"
            + (f" flags={','.join(flags)}" if flags else ""),
            flush=True,
        )

    def close(self) -> None:
        return None

# ---------------- Logging ----------------

def configure_logging(*, verbose: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )


def configure_file_logging(app_log_path: Path) -> None:
    """
    Add a file handler to the root logger (idempotent).
    Kept in CLI (presentation-layer concern).
    """
    root = logging.getLogger()
    app_log_path.parent.mkdir(parents=True, exist_ok=True)
    target = str(app_log_path.resolve())

    for h in root.handlers:
        if isinstance(h, logging.FileHandler) and getattr(h, "baseFilename", None) == target:
            return

    fh = logging.FileHandler(app_log_path, encoding="utf-8", delay=True)
    fh.setLevel(logging.INFO)
    fh.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(name)s: %(message)s"))
    root.addHandler(fh)

    if root.level > logging.INFO:
        root.setLevel(logging.INFO)

# ---------------- Helpers ----------------

def resolve_config(config_path: Optional[str], *, force_mock: bool) -> BridgeConfig:
    cfg = load_config(config_path)
    if force_mock:
        cfg = dataclasses.replace(cfg, variant=VARIANT_MOCK)
    return cfg


def _yes_no(value: object) -> str:
    return "yes" if value else "no"

# ---------------- Commands ----------------

def cmd_status(bridge: Bridge, *, address: str) -> int:
    try:
        call_blocking(bridge.request_permissions)
        perms = "granted"
    except BridgeOperationError as e:
        perms = f"denied ({e.details['reason']})"
    enabled = call_blocking(bridge.is_bluetooth_enabled)
    paired = call_blocking(bridge.is_paired, address)

    print(f"Bridge:      {type(bridge).__name__}")
    print(f"Permissions: {perms}")
    print(f"Bluetooth:   {'on' if enabled else 'off'}")
    print(f"Paired:      {_yes_no(paired)} ({address})")
    return 0


def cmd_stream(
    bridge: Bridge,
    *,
    address: str,
    secs: Optional[float],
    sink: ReadingSink,
) -> int:
    failed = threading.Event()
    reason: dict = {}

    def _on_error(r: str) -> None:
        reason["value"] = r
        failed.set()

    bridge.start(address, sink.on_reading, _on_error)
    deadline = (time.monotonic() + secs) if secs is not None else None
    try:
        while not failed.is_set():
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                break
            failed.wait(0.2 if remaining is None else min(0.2, remaining))
    except KeyboardInterrupt:
        pass
    finally:
        call_blocking(bridge.stop)
        sink.close()

    if failed.is_set():
        raise BridgeOperationError(
            f"Stream from {address} ended: {reason.get('value')}",
            hint="Check the device is on, paired and in range.",
            details={"operation": "start", "reason": reason.get("value")},
        )
    return 0


def run_command(args) -> int:
    configure_logging(verbose=args.verbose)
    if args.log_file:
        configure_file_logging(Path(args.log_file))

    cfg = resolve_config(args.config, force_mock=args.mock)
    bridge = create_bridge(cfg)

    if args.cmd == "status":
        return cmd_status(bridge, address=args.address)
    if args.cmd == "stream":
        return cmd_stream(
            bridge,
            address=args.address,
            secs=args.secs,
            sink=PrintReadingSink(as_json=args.json),
        )
    return 2
