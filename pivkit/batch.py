"""Processing many image pairs in parallel and writing the results as they finish."""

from __future__ import annotations

import os
import queue
import threading
from typing import Any, Callable, Sequence

from .output_thread import OutputThread
from .pivdata import PivData

QUEUE_SIZE = 10
_POLL_SECONDS = 0.05

ImagePair = tuple[str, Any, Any]


def split_list(current_thread: int, total_threads: int, datasize: int) -> list[int]:
    """Indices handled by one of ``total_threads`` threads.

    The indices are staggered so that the data are still computed roughly in
    order even though they are spread over several threads.
    """
    if total_threads <= 0:
        raise ValueError("total_threads must be positive")
    return list(range(current_thread, datasize, total_threads))


class PivThread(threading.Thread):
    """Runs an engine over some of the image pairs and puts the results in ``sink``.

    ``pairs`` holds ``(name, image_a, image_b)`` tuples; ``indices`` picks the
    ones this thread handles. Each result carries its index and the name of
    its first image without the suffix. An exception raised while processing
    ends the thread and is kept in ``error``.
    """

    def __init__(
        self,
        engine: Callable[[Any, Any], PivData],
        pairs: Sequence[ImagePair],
        indices: Sequence[int],
        sink: "queue.Queue[PivData]",
    ):
        super().__init__(daemon=True)
        self._engine = engine
        self._jobs = [(index, pairs[index]) for index in indices]
        self._sink = sink
        self._abort = threading.Event()
        self.error: BaseException | None = None

    def stop(self) -> None:
        """Ask the thread to stop before the next image pair."""
        self._abort.set()

    def _put(self, item: PivData) -> bool:
        while not self._abort.is_set():
            try:
                self._sink.put(item, timeout=_POLL_SECONDS)
                return True
            except queue.Full:
                continue
        return False

    def run(self) -> None:
        try:
            for index, (name, image_a, image_b) in self._jobs:
                if self._abort.is_set():
                    break
                data = self._engine(image_a, image_b)
                data.index = index
                data.set_name(name)
                if not self._put(data):
                    break
        except Exception as exc:  # handed to the caller by BatchProcessor
            self.error = exc


class BatchProcessor:
    """Processes every image pair on several threads and writes each result.

    ``engine_factory`` makes one engine per thread. ``write`` is called with
    each PivData as it becomes available, from a single output thread.
    """

    def __init__(
        self,
        engine_factory: Callable[[], Callable[[Any, Any], PivData]],
        pairs: Sequence[ImagePair],
        write: Callable[[PivData], Any],
        threads: int | None = None,
    ):
        if threads is None:
            threads = os.cpu_count() or 1
        if threads <= 0:
            raise ValueError("threads must be positive")
        self._engine_factory = engine_factory
        self._pairs = list(pairs)
        self._write = write
        self.threads = threads
        self._workers: list[PivThread] = []
        self._output: OutputThread | None = None

    def process(self) -> int:
        """Run the whole batch and return the number of results written.

        Returns early if ``stop`` is called; re-raises the first error met
        while processing an image pair.
        """
        sink: "queue.Queue[PivData]" = queue.Queue(maxsize=QUEUE_SIZE)
        written = 0

        def count_written() -> None:
            nonlocal written
            written += 1

        datasize = len(self._pairs)
        output = OutputThread(sink, datasize, self._write, on_file_written=count_written)
        workers = [
            PivThread(
                self._engine_factory(),
                self._pairs,
                split_list(k, self.threads, datasize),
                sink,
            )
            for k in range(self.threads)
        ]
        self._workers, self._output = workers, output

        for worker in workers:
            worker.start()
        output.start()
        try:
            while output.is_alive():
                output.join(_POLL_SECONDS)
                failed = next((w.error for w in workers if w.error is not None), None)
                if failed is not None:
                    self.stop()
                    output.join()
                    raise failed
        finally:
            self.stop()
            for worker in workers:
                worker.join()
        return written

    def stop(self) -> None:
        """Stop every processing thread and the output thread."""
        for worker in self._workers:
            worker.stop()
        if self._output is not None:
            self._output.stop()


__all__ = ["QUEUE_SIZE", "BatchProcessor", "PivThread", "split_list"]