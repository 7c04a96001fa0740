"""A worker thread that writes processed PIV data as it becomes available."""

from __future__ import annotations

import queue
import threading
from typing import Any, Callable

_POLL_SECONDS = 0.05


class OutputThread(threading.Thread):
    """Takes ``count`` items from a queue and hands each to ``write``.

    ``on_file_written`` is called after every item and ``on_done`` once the
    loop ends, whether it ran to completion or was stopped.
    """

    def __init__(
        self,
        source: "queue.Queue[Any]",
        count: int,
        write: Callable[[Any], Any],
        on_file_written: Callable[[], None] | None = None,
        on_done: Callable[[], None] | None = None,
    ):
        super().__init__(daemon=True)
        self._source = source
        self._count = count
        self._write = write
        self._on_file_written = on_file_written
        self._on_done = on_done
        self._abort = threading.Event()

    def stop(self) -> None:
        """Ask the loop to end before taking the next item."""
        self._abort.set()

    def _next_item(self) -> tuple[bool, Any]:
        while not self._abort.is_set():
            try:
                return True, self._source.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
        return False, None

    def run(self) -> None:
        written = 0
        while written < self._count and not self._abort.is_set():
            got, item = self._next_item()
            if not got:
                break
            self._write(item)
            if self._on_file_written is not None:
                self._on_file_written()
            written += 1
        if self._on_done is not None:
            self._on_done()


__all__ = ["OutputThread"]