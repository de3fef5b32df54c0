from __future__ import annotations

import threading
from collections import deque
from typing import Deque, Generic, Optional, TypeVar

T = TypeVar("T")


class EventQueue(Generic[T]):
    """Unbounded FIFO shared by many producers and a single consumer.

    ``put`` never blocks. ``get`` waits at most ``timeout`` seconds and
    returns ``None`` when nothing arrived or the queue was closed empty.
    """

    def __init__(self) -> None:
        self._items: Deque[T] = deque()
        self._cond = threading.Condition(threading.Lock())
        self._closed = False

    @property
    def size(self) -> int:
        return len(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, item: T) -> None:
        with self._cond:
            self._items.append(item)
            self._cond.notify()

    def get_nowait(self) -> Optional[T]:
        with self._cond:
            return self._items.popleft() if self._items else None

    def get(self, timeout: float | None = None) -> Optional[T]:
        with self._cond:
            if not self._items and not self._closed:
                self._cond.wait_for(lambda: self._items or self._closed, timeout=timeout)
            return self._items.popleft() if self._items else None

    def close(self) -> None:
        """Wake the consumer; items queued afterwards are still accepted."""
        with self._cond:
            self._closed = True
            self._cond.notify_all()
