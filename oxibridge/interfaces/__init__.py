from .bridge import Bridge, ErrorCallback, ReadingCallback, SuccessCallback
from .native_invoker import NativeInvoker
from .reading_sink import ReadingSink

__all__ = [
    "Bridge",
    "SuccessCallback",
    "ErrorCallback",
    "ReadingCallback",
    "NativeInvoker",
    "ReadingSink",
]
