"""
Cancellation
============

Cooperative cancellation signal shared between a caller and a render call.
"""

import threading

from .errors import RenderCancelledError


class CancellationToken:
    """Thread-safe, one-way cancellation flag.

    Render dispatchers run on their own threads, so the flag is backed by a
    ``threading.Event`` rather than an asyncio primitive.
    """

    def __init__(self, cancelled: bool = False):
        self._event = threading.Event()
        if cancelled:
            self._event.set()

    @classmethod
    def none(cls) -> "CancellationToken":
        """A token that is never cancelled by the core itself."""
        return cls()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        self._event.set()

    def raise_if_cancelled(self, operation_name: str) -> None:
        """Raise ``RenderCancelledError`` when the token has been cancelled."""
        if self._event.is_set():
            raise RenderCancelledError(operation_name)
