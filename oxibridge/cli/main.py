# oxibridge/cli/main.py
from __future__ import annotations

from typing import Optional

from oxibridge.core.errors import OxiBridgeError

from oxibridge.cli.args import parse_args
from oxibridge.cli.commands import run_command


def main(argv: Optional[list[str]] = None) -> int:
    args = parse_args(argv)
    try:
        return run_command(args)
    except OxiBridgeError as e:
        print(f"ERROR: {e.message}")
        if e.hint:
            print(f"Hint: {e.hint}")
        return 1


if __name__ == "__main__":
    raise SystemExit(main())
