"""
Collection Locking

Two layers guard each backing file:

- an in-process ``threading.Lock`` per path, so request threads queue up
  instead of racing for the file lock;
- an advisory ``filelock.FileLock`` on ``<file>.lock``, so other server
  processes sharing the data directory stay out while we hold it.

The file lock is taken with a small bounded retry. When the budget runs out
the caller gets a LockTimeoutError and nothing is written.
"""

import logging
import threading
import time
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, List

from filelock import FileLock, Timeout

from .errors import LockTimeoutError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry schedule for the advisory file lock."""

    retries: int = 3
    min_timeout: float = 0.1
    max_timeout: float = 1.0
    factor: float = 2.0
    wait_timeout: float = 10.0

    def delays(self) -> List[float]:
        """Sleep before each retry: min_timeout * factor**n, capped at max_timeout."""
        return [
            min(self.min_timeout * (self.factor ** attempt), self.max_timeout)
            for attempt in range(self.retries)
        ]


class LockRegistry:
    """Hands out the per-path locks used by the file-backed store."""

    def __init__(self, policy: RetryPolicy = RetryPolicy()):
        self.policy = policy
        self._locks: Dict[str, threading.Lock] = {}
        self._guard = threading.Lock()

    def _thread_lock(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._locks[key] = lock
            return lock

    def _acquire_file_lock(self, file_lock: FileLock) -> bool:
        """Try once, then once more after each delay of the retry policy."""
        delays = self.policy.delays()
        for attempt in range(len(delays) + 1):
            try:
                file_lock.acquire(timeout=0)
                return True
            except Timeout:
                if attempt == len(delays):
                    break
                logger.debug(f"File lock busy: path={file_lock.lock_file}, attempt={attempt + 1}")
                time.sleep(delays[attempt])
        return False

    @contextmanager
    def hold(self, path: Path, collection: str, operation: str) -> Iterator[None]:
        """Hold both locks for ``path`` for the duration of the block."""
        thread_lock = self._thread_lock(path)
        if not thread_lock.acquire(timeout=self.policy.wait_timeout):
            raise LockTimeoutError(
                f"Timed out waiting for in-process lock on {path.name}",
                collection=collection,
                operation=operation,
            )
        try:
            file_lock = FileLock(str(path) + ".lock")
            if not self._acquire_file_lock(file_lock):
                raise LockTimeoutError(
                    f"Could not acquire file lock on {path.name} after {self.policy.retries} retries",
                    collection=collection,
                    operation=operation,
                )
            try:
                yield
            finally:
                file_lock.release()
        finally:
            thread_lock.release()
