from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterator
from contextlib import contextmanager, suppress
from typing import Any, BinaryIO

from .metrics import HANDLES_OPENED

logger = logging.getLogger(__name__)


class ImageHandlePool:
    """Thread-safe pool of independent read handles on one image.

    A handle is owned by exactly one reader between checkout and return, so
    concurrent readers never share a seek position.
    """

    def __init__(self, opener: Callable[[], BinaryIO], max_idle: int = 8):
        self.opener = opener
        self.max_idle = max_idle

        self._idle: list[BinaryIO] = []
        self._lock = threading.RLock()
        self._closed = False
        self._total_opened = 0
        self._total_checkouts = 0
        self._in_use = 0

        self.metrics = {
            'idle_handles': 0,
            'in_use': 0,
            'opened_count': 0,
            'checkout_count': 0,
        }

    def _open_handle(self) -> BinaryIO:
        handle = self.opener()
        HANDLES_OPENED.inc()
        with self._lock:
            self._total_opened += 1
            self.metrics['opened_count'] = self._total_opened
        logger.debug("Opened image handle #%d", self._total_opened)
        return handle

    def _update_metrics(self) -> None:
        self.metrics['idle_handles'] = len(self._idle)
        self.metrics['in_use'] = self._in_use
        self.metrics['checkout_count'] = self._total_checkouts

    def get_handle(self) -> BinaryIO:
        """Check a handle out of the pool, opening a new one if none is idle."""
        with self._lock:
            if self._closed:
                raise RuntimeError("Image handle pool is closed")
            handle = self._idle.pop() if self._idle else None
            self._total_checkouts += 1
            self._in_use += 1
            self._update_metrics()

        if handle is None:
            try:
                handle = self._open_handle()
            except Exception:
                with self._lock:
                    self._in_use -= 1
                    self._update_metrics()
                raise
        return handle

    def return_handle(self, handle: BinaryIO) -> None:
        """Give a handle back; it is closed if the pool is full or closed."""
        with self._lock:
            self._in_use -= 1
            keep = not self._closed and len(self._idle) < self.max_idle
            if keep:
                self._idle.append(handle)
            self._update_metrics()
        if not keep:
            with suppress(Exception):
                handle.close()

    @contextmanager
    def checkout(self) -> Iterator[BinaryIO]:
        handle = self.get_handle()
        try:
            yield handle
        finally:
            self.return_handle(handle)

    def get_metrics(self) -> dict[str, Any]:
        with self._lock:
            return self.metrics.copy()

    def close_all(self) -> None:
        """Close idle handles; handles still checked out close on return."""
        with self._lock:
            self._closed = True
            for handle in self._idle:
                with suppress(Exception):
                    handle.close()
            self._idle.clear()
            self._update_metrics()
