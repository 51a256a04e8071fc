# oxibridge/interfaces/native_invoker.py
from __future__ import annotations

from typing import Any, Callable, Protocol, Sequence


class NativeInvoker(Protocol):
    """
    "Invoke native operation, receive result via continuation".

    on_success may be called more than once for streaming actions.
    """

    def exec(
        self,
        on_success: Callable[[Any], None],
        on_error: Callable[[str], None],
        service: str,
        action: str,
        args: Sequence[Any],
    ) -> None: ...
