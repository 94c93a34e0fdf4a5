# SPDX-License-Identifier: MIT
"""Cooperative cancellation shared by the traversal and its workers."""

from __future__ import annotations

import threading

from secret_detector.core.exceptions import ScanCancelledError


class CancellationToken:
    """
    A one-way cancellation signal.

    Workers poll it at their suspension points; nothing is ever
    interrupted mid-read.
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    def cancel(self) -> None:
        self._event.set()

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def raise_if_cancelled(self) -> None:
        if self._event.is_set():
            raise ScanCancelledError("scan cancelled")
