"""
Cooperative cancellation for long-running aggregations.
"""

from __future__ import annotations

import threading

from spatial.core.errors import OperationCancelled


class CancellationToken:
    """
    Thread-safe flag shared between a caller and aggregation workers.

    Workers call ``raise_if_cancelled()`` every few rows; any thread (or a
    signal handler) may call ``cancel()``.
    """

    def __init__(self):
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise OperationCancelled("Operation cancelled")
