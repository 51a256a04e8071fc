# oxibridge/cli/args.py
from __future__ import annotations

import argparse
from typing import Optional

from oxibridge.native.host import is_valid_address


def address_arg(value: str) -> str:
    if not is_valid_address(value):
        raise argparse.ArgumentTypeError(f"Invalid device address '{value}' (use XX:XX:XX:XX:XX:XX)")
    return value.upper()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="oxibridge")
    sub = parser.add_subparsers(dest="cmd", required=True)

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--address", required=True, type=address_arg, help="Oximeter Bluetooth address.")
    common.add_argument("--config", default=None, help="Bridge config YAML (default: mock bridge).")
    common.add_argument("--mock", action="store_true", help="Force the mock bridge regardless of config.")
    common.add_argument("--log-file", default=None, help="Also write logs to this file.")
    common.add_argument("-v", "--verbose", action="store_true", help="Debug logging on the console.")

    sub.add_parser("status", parents=[common], help="Show permission, adapter and pairing state.")

    ps = sub.add_parser("stream", parents=[common], help="Print readings until --secs elapse or Ctrl-C.")
    ps.add_argument("--secs", type=float, default=None)
    ps.add_argument("--json", action="store_true", help="Print each reading as one JSON line.")

    return parser


def parse_args(argv: Optional[list[str]] = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)
