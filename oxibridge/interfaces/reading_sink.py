from typing import Protocol

from oxibridge.model.reading import Reading


class ReadingSink(Protocol):
    def on_reading(self, reading: Reading) -> None: ...
    def close(self) -> None: ...
