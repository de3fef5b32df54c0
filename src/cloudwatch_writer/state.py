"""
Shared writer state behind a single read/write lock.

The dispatcher thread mutates the sequence token and the last error; the
facade reads the error and mutates the interval and the closing flag.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class ReadWriteLock:
    """Many concurrent readers or one writer; waiting writers go first."""

    def __init__(self) -> None:
        self._cond = threading.Condition(threading.Lock())
        self._readers = 0
        self._writer = False
        self._writers_waiting = 0

    @contextmanager
    def read(self) -> Iterator[None]:
        with self._cond:
            self._cond.wait_for(lambda: not self._writer and not self._writers_waiting)
            self._readers += 1
        try:
            yield
        finally:
            with self._cond:
                self._readers -= 1
                if not self._readers:
                    self._cond.notify_all()

    @contextmanager
    def write(self) -> Iterator[None]:
        with self._cond:
            self._writers_waiting += 1
            try:
                self._cond.wait_for(lambda: not self._writer and not self._readers)
            finally:
                self._writers_waiting -= 1
            self._writer = True
        try:
            yield
        finally:
            with self._cond:
                self._writer = False
                self._cond.notify_all()


class WriterState:
    def __init__(self, batch_interval: float = 0.0) -> None:
        self._lock = ReadWriteLock()
        self._batch_interval = batch_interval
        self._sequence_token: Optional[str] = None
        self._last_error: Optional[Exception] = None
        self._closing = False

    @property
    def batch_interval(self) -> float:
        with self._lock.read():
            return self._batch_interval

    @batch_interval.setter
    def batch_interval(self, value: float) -> None:
        with self._lock.write():
            self._batch_interval = value

    @property
    def sequence_token(self) -> Optional[str]:
        with self._lock.read():
            return self._sequence_token

    @sequence_token.setter
    def sequence_token(self, value: Optional[str]) -> None:
        with self._lock.write():
            self._sequence_token = value

    @property
    def last_error(self) -> Optional[Exception]:
        with self._lock.read():
            return self._last_error

    @last_error.setter
    def last_error(self, value: Optional[Exception]) -> None:
        with self._lock.write():
            self._last_error = value

    def take_error(self) -> Optional[Exception]:
        """Return the pending error and clear it in one step."""
        with self._lock.read():
            if self._last_error is None:
                return None
        with self._lock.write():
            err, self._last_error = self._last_error, None
            return err

    @property
    def closing(self) -> bool:
        with self._lock.read():
            return self._closing

    def mark_closing(self) -> None:
        # never reset
        with self._lock.write():
            self._closing = True
