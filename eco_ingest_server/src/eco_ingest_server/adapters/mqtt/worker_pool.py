"""Bounded worker pool for data messages.

The paho network thread only enqueues; worker threads run the ingest
pipeline, which waits on the weather service and the database. A full
queue rejects new work instead of growing without bound.
"""

import logging
import queue
import threading
from typing import Any, Callable, List, Optional, Tuple

log = logging.getLogger(__name__)

DEFAULT_QUEUE_SIZE = 1000
DEFAULT_NUM_WORKERS = 4

Task = Tuple[Callable[[], Any], Optional[str]]


class BoundedWorkerPool:
    def __init__(
        self,
        max_queue_size: int = DEFAULT_QUEUE_SIZE,
        num_workers: int = DEFAULT_NUM_WORKERS,
    ):
        self._queue: "queue.Queue[Task]" = queue.Queue(maxsize=max_queue_size)
        self._num_workers = num_workers
        self._stop_event = threading.Event()
        self._workers: List[threading.Thread] = []

        self._enqueued = 0
        self._dropped = 0
        self._processed = 0
        self._errors = 0
        self._lock = threading.Lock()

    def start(self) -> None:
        self._stop_event.clear()
        for i in range(self._num_workers):
            t = threading.Thread(
                target=self._worker_loop,
                args=(i,),
                daemon=True,
                name=f"ingest-worker-{i}",
            )
            t.start()
            self._workers.append(t)
        log.info(
            "Started %d ingest workers, queue limit %d", self._num_workers, self._queue.maxsize
        )

    def stop(self, drain: bool = True) -> None:
        """Stop workers. If drain=True, finish queued tasks first."""
        if drain:
            self._queue.join()
        self._stop_event.set()
        for t in self._workers:
            t.join(timeout=5.0)
        self._workers.clear()
        log.info("Ingest workers stopped: %s", self.metrics)

    def enqueue(self, task: Callable[[], Any], label: Optional[str] = None) -> bool:
        try:
            self._queue.put_nowait((task, label))
        except queue.Full:
            with self._lock:
                self._dropped += 1
            log.warning("Ingest queue full, dropped task for %s", label or "?")
            return False
        with self._lock:
            self._enqueued += 1
        return True

    def _worker_loop(self, worker_id: int) -> None:
        while not self._stop_event.is_set():
            try:
                task, label = self._queue.get(timeout=1.0)
            except queue.Empty:
                continue

            try:
                task()
                with self._lock:
                    self._processed += 1
            except Exception:
                with self._lock:
                    self._errors += 1
                log.exception("Worker %d failed on task for %s", worker_id, label or "?")
            finally:
                self._queue.task_done()

    @property
    def metrics(self) -> dict:
        with self._lock:
            return {
                "queue_depth": self._queue.qsize(),
                "queue_max": self._queue.maxsize,
                "enqueued": self._enqueued,
                "dropped": self._dropped,
                "processed": self._processed,
                "errors": self._errors,
            }
