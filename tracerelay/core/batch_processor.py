"""Background batch jobs for asynchronous trace delivery."""

from __future__ import annotations

import atexit
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable

logger = logging.getLogger(__name__)

BatchCallback = Callable[[list[Any]], Any]


@dataclass
class BatchJobConfig:
    """Configuration for a batch job."""

    # Maximum items handed to the callback at once
    batch_size: int = 1000
    # Maximum time between flushes (in seconds)
    call_period: float = 2.0
    # Number of worker threads draining the queue
    worker_num: int = 2
    # Maximum queue size before items are dropped
    max_queue_size: int = 10000
    # Maximum time to wait for workers on stop (in seconds)
    shutdown_timeout_seconds: float = 30.0

    def __post_init__(self) -> None:
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be positive, got {self.batch_size}")
        if self.call_period <= 0:
            raise ValueError(f"call_period must be positive, got {self.call_period}")
        if self.worker_num < 1:
            raise ValueError(f"worker_num must be positive, got {self.worker_num}")


class BatchJob:
    """
    Queue plus worker pool for one identifier.

    Workers flush when ``batch_size`` items are waiting or every
    ``call_period`` seconds, whichever comes first. A failing callback
    discards its batch.
    """

    def __init__(self, identifier: str, callback: BatchCallback, config: BatchJobConfig | None = None) -> None:
        self.identifier = identifier
        self._callback = callback
        self._config = config or BatchJobConfig()
        self._queue: deque[Any] = deque()
        self._cond = threading.Condition()
        self._shutdown_event = threading.Event()
        self._workers: list[threading.Thread] = []
        self._started = False
        self._dropped_items = 0
        self._failed_batches = 0

    def __repr__(self) -> str:
        return f"BatchJob(identifier={self.identifier}, queued={self.queue_size}, started={self._started})"

    @property
    def config(self) -> BatchJobConfig:
        return self._config

    @property
    def is_running(self) -> bool:
        return self._started

    def start(self) -> None:
        """Start the worker threads."""
        if self._started:
            return

        self._started = True
        self._shutdown_event.clear()
        for index in range(self._config.worker_num):
            worker = threading.Thread(
                target=self._worker_loop,
                daemon=True,
                name=f"tracerelay-batch-{self.identifier}-{index}",
            )
            worker.start()
            self._workers.append(worker)
        logger.debug(f"BatchJob {self.identifier} started with {self._config.worker_num} workers")

    def stop(self, timeout: float | None = None) -> None:
        """
        Stop the workers and flush what is left in the queue.

        Args:
            timeout: Maximum time to wait for each worker
        """
        if not self._started:
            return

        with self._cond:
            self._shutdown_event.set()
            self._cond.notify_all()

        for worker in self._workers:
            worker.join(timeout=timeout or self._config.shutdown_timeout_seconds)
        self._workers.clear()

        self.flush()

        self._started = False
        logger.debug(
            f"BatchJob {self.identifier} stopped. Dropped {self._dropped_items} items, "
            f"{self._failed_batches} batches failed."
        )

    def submit(self, item: Any) -> bool:
        """
        Queue an item.

        Returns:
            True if queued, False if the job is stopped or the queue is full
        """
        with self._cond:
            if not self._started or self._shutdown_event.is_set():
                logger.warning(f"BatchJob {self.identifier} is not running, dropping item")
                return False

            if len(self._queue) >= self._config.max_queue_size:
                self._dropped_items += 1
                logger.warning(
                    f"Batch queue {self.identifier} full ({self._config.max_queue_size}), dropping item. "
                    f"Total dropped: {self._dropped_items}"
                )
                return False

            self._queue.append(item)

            if len(self._queue) >= self._config.batch_size:
                self._cond.notify()

            return True

    def flush(self) -> None:
        """Send everything queued, on the calling thread."""
        while self._run_batch():
            pass

    def _worker_loop(self) -> None:
        while not self._shutdown_event.is_set():
            with self._cond:
                if len(self._queue) < self._config.batch_size:
                    self._cond.wait(timeout=self._config.call_period)

            if self._shutdown_event.is_set():
                break

            self._run_batch()

    def _run_batch(self) -> bool:
        """Send one batch. Returns False when the queue was empty."""
        batch: list[Any] = []
        with self._cond:
            while self._queue and len(batch) < self._config.batch_size:
                batch.append(self._queue.popleft())

        if not batch:
            return False

        try:
            self._callback(batch)
            logger.debug(f"Delivered batch of {len(batch)} items for {self.identifier}")
        except Exception as e:
            with self._cond:
                self._failed_batches += 1
            logger.error(f"Failed to deliver batch of {len(batch)} items for {self.identifier}: {e}")

        return True

    @property
    def queue_size(self) -> int:
        with self._cond:
            return len(self._queue)

    @property
    def dropped_item_count(self) -> int:
        return self._dropped_items

    @property
    def failed_batch_count(self) -> int:
        return self._failed_batches


class BatchRunner:
    """
    Registry of batch jobs keyed by identifier.

    Reporters sharing an identifier share one queue and worker pool.
    """

    _instance: BatchRunner | None = None
    _instance_lock = threading.Lock()

    def __init__(self) -> None:
        self._jobs: dict[str, BatchJob] = {}
        self._lock = threading.Lock()

    @classmethod
    def get_instance(cls) -> BatchRunner:
        """Process-wide runner, stopped at interpreter exit."""
        if cls._instance is None:
            with cls._instance_lock:
                if cls._instance is None:
                    cls._instance = BatchRunner()
                    atexit.register(cls._instance.stop)
        return cls._instance

    def register_job(
        self,
        identifier: str,
        callback: BatchCallback,
        config: BatchJobConfig | None = None,
    ) -> BatchJob:
        """
        Get the running job for ``identifier``, creating and starting it if needed.

        An existing running job keeps its original callback and config.
        """
        with self._lock:
            job = self._jobs.get(identifier)
            if job is None or not job.is_running:
                job = BatchJob(identifier, callback, config)
                job.start()
                self._jobs[identifier] = job
            return job

    def get_job(self, identifier: str) -> BatchJob | None:
        with self._lock:
            return self._jobs.get(identifier)

    def submit_item(self, identifier: str, item: Any) -> bool:
        """Queue ``item`` on the job ``identifier``; False if it cannot be queued."""
        job = self.get_job(identifier)
        if job is None:
            logger.warning(f"No batch job registered for {identifier}, dropping item")
            return False
        return job.submit(item)

    def stop(self, timeout: float | None = None) -> None:
        """Stop every job, flushing queued items."""
        with self._lock:
            jobs = list(self._jobs.values())
        for job in jobs:
            job.stop(timeout=timeout)
